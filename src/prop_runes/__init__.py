"""Rewrite `$prop` macro declarations into a single `$props()` destructuring."""

# Config
from prop_runes.config import RunesConfig as RunesConfig

# Edits
from prop_runes.edits import EditList as EditList
from prop_runes.edits import Mapping as Mapping

# Emitter
from prop_runes.emitter import emit_declaration as emit_declaration

# Errors
from prop_runes.errors import ParseError as ParseError
from prop_runes.errors import PropMacroError as PropMacroError
from prop_runes.errors import PropRunesError as PropRunesError

# Parser
from prop_runes.parser import SourceText as SourceText
from prop_runes.parser import parse_script as parse_script

# Preprocessor
from prop_runes.preprocess import MarkupResult as MarkupResult
from prop_runes.preprocess import Preprocessor as Preprocessor
from prop_runes.preprocess import preprocess as preprocess

# Scanner
from prop_runes.scanner import PropDescriptor as PropDescriptor
from prop_runes.scanner import PropScanner as PropScanner
from prop_runes.scanner import TransformState as TransformState

# Macro shapes
from prop_runes.shapes import AliasWrapper as AliasWrapper
from prop_runes.shapes import BindableProp as BindableProp
from prop_runes.shapes import PlainProp as PlainProp
from prop_runes.shapes import RestProp as RestProp

# Source maps
from prop_runes.sourcemap import SourceMap as SourceMap

# Transform
from prop_runes.transform import TransformResult as TransformResult
from prop_runes.transform import has_prop_macros as has_prop_macros
from prop_runes.transform import transform_props as transform_props
