from prop_runes.config import (
	DEFAULT_EXCLUDE,
	ENV_PROP_RUNES_EXCLUDE,
	ENV_PROP_RUNES_LANG,
	RunesConfig,
)


def test_defaults():
	config = RunesConfig()
	assert config.lang == "ts"
	assert config.exclude == DEFAULT_EXCLUDE
	assert config.pattern.search("const a = $prop();")
	assert config.pattern.search("const a = $prop.rest();")
	assert not config.pattern.search("const a = $props();")


def test_from_env_without_overrides():
	assert RunesConfig.from_env({}) == RunesConfig()


def test_from_env_overrides():
	config = RunesConfig.from_env(
		{ENV_PROP_RUNES_LANG: " typescript ", ENV_PROP_RUNES_EXCLUDE: "dist, vendor,,"}
	)
	assert config.lang == "typescript"
	assert config.exclude == ("dist", "vendor")


def test_from_env_empty_exclude_disables_exclusion():
	config = RunesConfig.from_env({ENV_PROP_RUNES_EXCLUDE: ""})
	assert config.exclude == ()
	assert not config.is_excluded("node_modules/x.svelte")


def test_from_env_reads_os_environ(monkeypatch):
	monkeypatch.setenv(ENV_PROP_RUNES_LANG, "tsx")
	assert RunesConfig.from_env().lang == "tsx"


def test_is_excluded():
	config = RunesConfig()
	assert config.is_excluded("/repo/node_modules/pkg/A.svelte")
	assert config.is_excluded("/repo/.svelte-kit/output/B.svelte")
	assert not config.is_excluded("/repo/src/routes/+page.svelte")
	assert not config.is_excluded(None)
