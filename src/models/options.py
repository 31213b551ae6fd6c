"""
User-supplied synthesis options

Options mirrors the record a project hands to the synthesizer. Attribute
names follow the option keys projects already write in their build
config (outputPath, extraBabelIncludes, ...), so a parsed config mapping
can be fed straight into options_createFromDict().
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, Union


@dataclass
class Options:
    """
    Project options for one synthesis.

    Attributes:
        cwd: Project working directory; every relative path resolves here
        entry: Entry point mapping/list passed through to the descriptor
        outputPath: Output directory (default <cwd>/dist)
        publicPath: Public URL prefix for emitted assets
        theme: Theme variables, or a path to a YAML/JSON theme file
        browserslist: Browser targets for the vendor-prefix pass
        disableCSSModules: Turn off class-name scoping everywhere
        disableCSSSourceMap: Turn off CSS source maps in production
        extraResolveModules: Extra module search directories
        extraResolveExtensions: Extensions tried before the defaults
        alias: Module alias mapping
        extraBabelIncludes: Extra directories (relative to cwd) to transpile
        commons: Code-splitting group specs, one plugin each
        copy: Static-copy specs
        manifest: True, or a mapping of manifest emitter options
        externals: Externals passed through to the descriptor
        babel: Transformer options replacing the bundled defaults
        sass: Options for the sass preprocessor loader
        devtool: Explicit source-map mode
        hash: Add content hashes to production filenames
        ignoreMomentLocale: Strip moment.js locales
        extraPostCSSPlugins: Extra post-processor plugin entries
        define: User constants injected at build time
    """

    cwd: Optional[str] = field(default=None)
    entry: Any = field(default=None)
    outputPath: Optional[str] = field(default=None)
    publicPath: Optional[str] = field(default=None)
    theme: Union[Dict[str, Any], str, None] = field(default=None)
    browserslist: Optional[List[str]] = field(default=None)
    disableCSSModules: bool = field(default=False)
    disableCSSSourceMap: bool = field(default=False)
    extraResolveModules: List[str] = field(default_factory=list)
    extraResolveExtensions: List[str] = field(default_factory=list)
    alias: Dict[str, str] = field(default_factory=dict)
    extraBabelIncludes: List[str] = field(default_factory=list)
    commons: List[Dict[str, Any]] = field(default_factory=list)
    copy: Optional[List[Dict[str, Any]]] = field(default=None)
    manifest: Union[bool, Dict[str, Any], None] = field(default=None)
    externals: Any = field(default=None)
    babel: Optional[Dict[str, Any]] = field(default=None)
    sass: Optional[Dict[str, Any]] = field(default=None)
    devtool: Optional[str] = field(default=None)
    hash: bool = field(default=False)
    ignoreMomentLocale: bool = field(default=False)
    extraPostCSSPlugins: List[Any] = field(default_factory=list)
    define: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def options_createFromDict(cls: Type["Options"], raw: Dict[str, Any]) -> "Options":
        """
        Create Options from a plain mapping.

        Keys that are not Options fields are dropped, and keys whose value
        is None fall back to the field default.

        Args:
            raw: Option mapping, typically parsed from a project config file

        Returns:
            Options instance
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered = {k: v for k, v in raw.items() if k in valid_fields and v is not None}
        return cls(**filtered)
