"""
Lint configuration resolution tests

Tests engine selection from the project manifest and the replace vs
additive handling of project rc files.
"""

import json
from pathlib import Path
import tempfile

import pytest

from packsynth.config.settings import EnvFlags, appsettings
from packsynth.lib.defaults import DEFAULT_LINT_BASE
from packsynth.lib.lint import comments_strip, lintConfig_default, lintConfig_resolve, rc_merge
from packsynth.lib.manifest import ManifestError, dependencies_declared, manifest_read
from packsynth.lib.probe import StaticResolver
from packsynth.models import LintMergeStrategy, Options, SynthesisState


@pytest.fixture
def project_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def resolve(cwd, resolver=None):
    state = SynthesisState(
        options=Options(cwd=str(cwd)),
        env=EnvFlags(),
        resolver=resolver or StaticResolver({}),
        verbosity=0,
    )
    return lintConfig_resolve(state).lintConfig


class TestDefaults:
    """Without project overrides the bundled config is used"""

    def test_bundled_config(self, project_dir):
        config = resolve(project_dir)
        assert config.strategy is LintMergeStrategy.DEFAULT
        assert config.eslintPath == "eslint"
        assert config.baseConfig == DEFAULT_LINT_BASE
        assert config.useEslintrc is False
        assert config.ignore is False

    def test_defaults_are_fresh_copies(self):
        """Mutating one resolved config never leaks into the next"""
        first = lintConfig_default()
        first.baseConfig["rules"] = {"no-console": "off"}
        assert "rules" not in lintConfig_default().baseConfig


class TestEngineOverride:
    """Project lint engine selection"""

    def test_project_engine_used_when_declared(self, project_dir):
        (project_dir / "package.json").write_text(
            json.dumps({"devDependencies": {"eslint": "^4.0.0"}})
        )
        resolver = StaticResolver({"eslint": "/project/node_modules/eslint"})
        config = resolve(project_dir, resolver)
        assert config.eslintPath == "/project/node_modules/eslint"

    def test_declared_but_unresolvable_keeps_bundled(self, project_dir):
        (project_dir / "package.json").write_text(
            json.dumps({"dependencies": {"eslint": "^4.0.0"}})
        )
        config = resolve(project_dir, StaticResolver({}))
        assert config.eslintPath == "eslint"

    def test_transitive_engine_used(self, project_dir):
        """An engine pulled in by a shared config package is picked up"""
        (project_dir / "package.json").write_text(
            json.dumps({"devDependencies": {"eslint-config-x": "1"}})
        )
        resolver = StaticResolver({"eslint": "/project/node_modules/eslint"})
        assert resolve(project_dir, resolver).eslintPath == "/project/node_modules/eslint"

    def test_no_manifest_keeps_bundled(self, project_dir):
        """Without a manifest the project tree is not probed"""
        resolver = StaticResolver({"eslint": "/project/node_modules/eslint"})
        assert resolve(project_dir, resolver).eslintPath == "eslint"

    def test_toolchain_engine_is_not_a_project_engine(self, project_dir):
        """An engine only found in the bundled toolchain stays the bundled one"""
        (project_dir / "package.json").write_text(json.dumps({"dependencies": {"react": "16"}}))
        bundled = appsettings.toolchain_dir / "node_modules" / "eslint"
        resolver = StaticResolver({"eslint": str(bundled)})
        assert resolve(project_dir, resolver).eslintPath == "eslint"

    def test_broken_manifest_is_not_fatal(self, project_dir):
        (project_dir / "package.json").write_text("{ not json")
        assert resolve(project_dir).eslintPath == "eslint"


class TestManifestReader:
    """package.json parsing"""

    def test_declared_dependencies(self, project_dir):
        (project_dir / "package.json").write_text(json.dumps({
            "dependencies": {"react": "16"},
            "devDependencies": {"eslint": "4"},
        }))
        assert dependencies_declared(project_dir) == {"react", "eslint"}

    def test_missing_manifest(self, project_dir):
        assert dependencies_declared(project_dir) == set()
        with pytest.raises(ManifestError):
            manifest_read(project_dir)

    def test_non_object_manifest(self, project_dir):
        (project_dir / "package.json").write_text("[]")
        with pytest.raises(ManifestError, match="object"):
            manifest_read(project_dir)


class TestRcFile:
    """Project rc file handling"""

    def test_extends_replaces_defaults(self, project_dir):
        """An rc file with extends is authoritative"""
        (project_dir / ".eslintrc").write_text(json.dumps({"extends": "airbnb"}))
        config = resolve(project_dir)
        assert config.strategy is LintMergeStrategy.REPLACE
        assert config.baseConfig is None
        assert config.useEslintrc is True
        assert config.ignore is True
        assert config.loaderOptions_get()["baseConfig"] is False

    def test_without_extends_merges_additively(self, project_dir):
        """Rules are layered over the default base config"""
        (project_dir / ".eslintrc").write_text(
            json.dumps({"rules": {"no-console": "off"}, "globals": {"APP": True}})
        )
        config = resolve(project_dir)
        assert config.strategy is LintMergeStrategy.ADDITIVE
        assert config.useEslintrc is False
        assert config.ignore is False
        for key, value in DEFAULT_LINT_BASE.items():
            assert config.baseConfig[key] == value
        assert config.baseConfig["rules"] == {"no-console": "off"}
        assert config.baseConfig["globals"] == {"APP": True}

    def test_yaml_rc_file(self, project_dir):
        (project_dir / ".eslintrc.yml").write_text("rules:\n  semi: error\n")
        config = resolve(project_dir)
        assert config.baseConfig["rules"] == {"semi": "error"}

    def test_tab_indented_json_rc(self, project_dir):
        """Tabs are valid JSON whitespace even though YAML rejects them"""
        (project_dir / ".eslintrc").write_text('{\n\t"extends": "airbnb"\n}')
        assert resolve(project_dir).strategy is LintMergeStrategy.REPLACE

    def test_commented_json_rc(self, project_dir):
        (project_dir / ".eslintrc").write_text(
            '// team config\n'
            '{\n'
            '  /* shared rules */\n'
            '  "extends": "airbnb", // base\n'
            '  "settings": {"docs": "https://example.com/lint"}\n'
            '}\n'
        )
        assert resolve(project_dir).strategy is LintMergeStrategy.REPLACE

    def test_commented_json_rc_file_additive(self, project_dir):
        (project_dir / ".eslintrc.json").write_text(
            '{\n\t// no extends here\n\t"rules": {"semi": "off"}\n}\n'
        )
        config = resolve(project_dir)
        assert config.strategy is LintMergeStrategy.ADDITIVE
        assert config.baseConfig["rules"] == {"semi": "off"}

    def test_yaml_content_in_plain_rc(self, project_dir):
        """A legacy .eslintrc written as YAML still parses"""
        (project_dir / ".eslintrc").write_text("extends: standard\n")
        assert resolve(project_dir).strategy is LintMergeStrategy.REPLACE

    def test_unparseable_rc_falls_back(self, project_dir):
        """A broken rc file leaves the previous config in place"""
        (project_dir / ".eslintrc").write_text("rules: [unclosed\n")
        config = resolve(project_dir)
        assert config.strategy is LintMergeStrategy.DEFAULT
        assert config.baseConfig == DEFAULT_LINT_BASE

    def test_non_mapping_rc_falls_back(self, project_dir):
        (project_dir / ".eslintrc").write_text("- just\n- a list\n")
        assert resolve(project_dir).strategy is LintMergeStrategy.DEFAULT

    def test_engine_and_rc_combine(self, project_dir):
        """Both overrides apply independently"""
        (project_dir / "package.json").write_text(json.dumps({"devDependencies": {"eslint": "4"}}))
        (project_dir / ".eslintrc").write_text(json.dumps({"extends": ["standard"]}))
        config = resolve(project_dir, StaticResolver({"eslint": "/p/node_modules/eslint"}))
        assert config.eslintPath == "/p/node_modules/eslint"
        assert config.strategy is LintMergeStrategy.REPLACE


class TestMergeStrategy:
    """rc_merge in isolation"""

    def test_empty_extends_is_additive(self):
        """A blank extends does not wipe the default one"""
        merged = rc_merge(lintConfig_default(), {"extends": "", "rules": {"semi": "off"}})
        assert merged.strategy is LintMergeStrategy.ADDITIVE
        assert merged.baseConfig["extends"] == DEFAULT_LINT_BASE["extends"]

    def test_merge_leaves_input_untouched(self):
        base = lintConfig_default()
        rc_merge(base, {"extends": "airbnb"})
        assert base.strategy is LintMergeStrategy.DEFAULT
        assert base.baseConfig == DEFAULT_LINT_BASE


class TestCommentStripping:
    """Comment removal ahead of JSON parsing"""

    def test_line_and_block_comments(self):
        text = '{"a": 1, // one\n/* two */ "b": 2}'
        assert json.loads(comments_strip(text)) == {"a": 1, "b": 2}

    def test_comment_markers_inside_strings_kept(self):
        text = '{"url": "http://x/*y*/", "q": "say \\"//hi\\""}'
        assert comments_strip(text) == text
