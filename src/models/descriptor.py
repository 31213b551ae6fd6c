"""
Pipeline descriptor models

Type-safe structures for everything a synthesis produces: loader chains,
transformation rules and their tiers, plugin entries, the lint
configuration, and the final PipelineDescriptor.
"""

import re
from enum import Enum, IntEnum
from dataclasses import dataclass, field
from re import Pattern
from typing import Any, Callable, Dict, List, Optional, Union

# A rule scope is either a filesystem path or a compiled pattern
Condition = Union[str, Pattern[str]]


class RuleTier(IntEnum):
    """
    Rule ordering tiers, in required evaluation order

    The tier decides precedence among rules; declaration order only
    matters inside a tier.
    """
    PRE_PASS = 1        # lint / type-lint, enforce: pre
    ASSET_FALLBACK = 2  # catch-all for unrecognized extensions
    LANGUAGE = 3        # script, typed-script
    EXTRA_SOURCE = 4    # user-declared extra source directories
    MARKUP = 5          # html passthrough
    STYLE = 6           # css / less / sass


class StyleLanguage(Enum):
    """Style languages with their own rule pair"""
    CSS = "css"
    LESS = "less"
    SASS = "sass"


class StyleScope(Enum):
    """Which sources a style rule covers"""
    PROJECT = "project"        # class-name scoping on
    DEPENDENCY = "dependency"  # node_modules, scoping off


class PluginCondition(Enum):
    """Activation condition a plugin entry was selected under"""
    ALWAYS = "always"
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    ANALYSIS = "analysis"
    FEATURE = "feature"


class LintMergeStrategy(Enum):
    """How a project lint rc file was combined with the defaults"""
    DEFAULT = "default"    # no rc file applied
    REPLACE = "replace"    # rc file declares `extends`; trusted verbatim
    ADDITIVE = "additive"  # rc file shallow-merged over the default base config


@dataclass
class Loader:
    """
    One tool in a rule's chain

    Attributes:
        loader: Tool name (or resolved path) the bundler loads
        options: Per-tool option payload
    """
    loader: str
    options: Dict[str, Any] = field(default_factory=dict)

    def asDict(self) -> Dict[str, Any]:
        if not self.options:
            return {"loader": self.loader}
        return {"loader": self.loader, "options": self.options}


@dataclass
class Rule:
    """
    Transformation rule: match pattern plus ordered tool chain

    Attributes:
        name: Stable identifier (e.g., "eslint", "babel", "less-project")
        tier: Ordering tier
        use: Loader chain, outermost first
        test: Pattern matched against the resource path
        include: Scopes the rule is limited to
        exclude: Scopes the rule skips
        enforce: "pre" for pre-pass rules
    """
    name: str
    tier: RuleTier
    use: List[Loader] = field(default_factory=list)
    test: Optional[Pattern[str]] = None
    include: List[Condition] = field(default_factory=list)
    exclude: List[Condition] = field(default_factory=list)
    enforce: Optional[str] = None

    def loaders_names(self) -> List[str]:
        """Loader names in chain order"""
        return [entry.loader for entry in self.use]

    def loader_get(self, name: str) -> Optional[Loader]:
        """First loader in the chain with the given name, or None"""
        for entry in self.use:
            if entry.loader == name:
                return entry
        return None

    def asDict(self) -> Dict[str, Any]:
        """Render as the bundler's rule mapping"""
        rendered: Dict[str, Any] = {}
        if self.test is not None:
            rendered["test"] = self.test
        if self.include:
            rendered["include"] = _conditions_render(self.include)
        if self.exclude:
            rendered["exclude"] = _conditions_render(self.exclude)
        if self.enforce:
            rendered["enforce"] = self.enforce
        rendered["use"] = [entry.asDict() for entry in self.use]
        return rendered


@dataclass
class StyleRule(Rule):
    """
    Style rule, one of a (project, dependency) pair per style language

    Attributes:
        language: Style language this rule matches
        scope: Project sources or external dependencies
        extracted: Chain starts with the extraction wrapper instead of
                   the runtime injector
    """
    language: StyleLanguage = StyleLanguage.CSS
    scope: StyleScope = StyleScope.PROJECT
    extracted: bool = False


@dataclass
class PluginEntry:
    """
    Opaque, named pipeline extension

    Attributes:
        name: Plugin name as the bundler knows it
        options: Option payload handed to the plugin
        condition: Activation group the entry was selected under
    """
    name: str
    options: Any = field(default_factory=dict)
    condition: PluginCondition = PluginCondition.ALWAYS

    def asDict(self) -> Dict[str, Any]:
        return {"plugin": self.name, "options": self.options}


@dataclass
class LintConfig:
    """
    Resolved script-lint configuration

    Attributes:
        formatter: Diagnostic formatter
        baseConfig: Default rule-set bundle, or None when the project rc
                    file is authoritative
        eslintPath: Lint engine binary (bundled name or project path)
        useEslintrc: Trust the project-local rc file verbatim
        ignore: Honour ignore files instead of tolerating missing config
        strategy: How the project rc file was merged
    """
    formatter: str
    baseConfig: Optional[Dict[str, Any]]
    eslintPath: str
    useEslintrc: bool = False
    ignore: bool = False
    strategy: LintMergeStrategy = LintMergeStrategy.DEFAULT

    def loaderOptions_get(self) -> Dict[str, Any]:
        """Option payload for the lint loader"""
        return {
            "formatter": self.formatter,
            "baseConfig": self.baseConfig if self.baseConfig is not None else False,
            "ignore": self.ignore,
            "eslintPath": self.eslintPath,
            "useEslintrc": self.useEslintrc,
        }


@dataclass
class OutputSpec:
    """Output naming scheme"""
    path: str
    filename: str
    chunkFilename: str
    publicPath: Optional[str] = None
    pathinfo: bool = False

    def asDict(self) -> Dict[str, Any]:
        rendered: Dict[str, Any] = {
            "path": self.path,
            "pathinfo": self.pathinfo,
            "filename": self.filename,
            "chunkFilename": self.chunkFilename,
        }
        if self.publicPath is not None:
            rendered["publicPath"] = self.publicPath
        return rendered


@dataclass
class ResolveSpec:
    """Module resolution configuration"""
    modules: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=list)
    alias: Dict[str, str] = field(default_factory=dict)

    def asDict(self) -> Dict[str, Any]:
        return {
            "modules": list(self.modules),
            "extensions": list(self.extensions),
            "alias": dict(self.alias),
        }


@dataclass
class PipelineDescriptor:
    """
    The complete, declarative build configuration

    Produced fresh on every synthesis. descriptor_toDict() renders the
    mapping shape the bundler reads.
    """
    mode: str
    output: OutputSpec
    resolve: ResolveSpec
    rules: List[Rule] = field(default_factory=list)
    plugins: List[PluginEntry] = field(default_factory=list)
    entry: Any = None
    externals: Any = None
    devtool: Optional[str] = None
    bail: bool = False
    node: Dict[str, str] = field(default_factory=dict)
    performance: Dict[str, Any] = field(default_factory=dict)

    def rules_byTier(self, tier: RuleTier) -> List[Rule]:
        """Rules belonging to one tier, in declaration order"""
        return [rule for rule in self.rules if rule.tier == tier]

    def rule_get(self, name: str) -> Optional[Rule]:
        """Rule by name, or None"""
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def styleRules_get(self) -> List[StyleRule]:
        """All style rules"""
        return [rule for rule in self.rules if isinstance(rule, StyleRule)]

    def plugins_named(self, name: str) -> List[PluginEntry]:
        """All plugin entries with the given name"""
        return [plugin for plugin in self.plugins if plugin.name == name]

    def plugin_has(self, name: str) -> bool:
        return bool(self.plugins_named(name))

    def descriptor_toDict(self) -> Dict[str, Any]:
        """Render as the bundler configuration mapping"""
        return {
            "mode": self.mode,
            "bail": self.bail,
            "devtool": self.devtool,
            "entry": self.entry,
            "output": self.output.asDict(),
            "resolve": self.resolve.asDict(),
            "module": {"rules": [rule.asDict() for rule in self.rules]},
            "plugins": [plugin.asDict() for plugin in self.plugins],
            "externals": self.externals,
            "node": dict(self.node),
            "performance": dict(self.performance),
        }


# Hook applied to the finished descriptor before it is returned
DescriptorHook = Callable[[PipelineDescriptor], PipelineDescriptor]


def _conditions_render(conditions: List[Condition]) -> Union[Condition, List[Condition]]:
    """Single conditions render bare, several as a list"""
    if len(conditions) == 1:
        return conditions[0]
    return list(conditions)


def pattern_make(expression: str) -> Pattern[str]:
    """Compile a rule match pattern"""
    return re.compile(expression)
