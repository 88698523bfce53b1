"""
typeref

Rewrites TypeScript-style import() type references in JSDoc comments into
jsdoc module references (module:path~Symbol).
"""

from .models import FileInfo, ImportReference, Phase, RunStats
from .exceptions import TyperefError, ConfigurationError, SourceRootError, PhaseOrderError
from .config_loader import RewriterConfig, ConfigLoader, load_config
from .typedef_index import ModuleTypeDefIndex
from .file_info_cache import FileInfoCache
from .resolvers import PathResolver
from .context import RunContext
from .rewriter import CommentRewriter, module_token
from .host import TyperefPlugin, create_plugin
from .runner import RewriteRunner, RunResult, discover_sources

__version__ = '0.1.0'

__all__ = [
    'FileInfo', 'ImportReference', 'Phase', 'RunStats',
    'TyperefError', 'ConfigurationError', 'SourceRootError', 'PhaseOrderError',
    'RewriterConfig', 'ConfigLoader', 'load_config',
    'ModuleTypeDefIndex', 'FileInfoCache', 'PathResolver', 'RunContext',
    'CommentRewriter', 'module_token', 'TyperefPlugin', 'create_plugin',
    'RewriteRunner', 'RunResult', 'discover_sources',
]
