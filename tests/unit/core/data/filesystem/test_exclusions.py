"""Test suite for exclusion policies."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from file_explorer.core.data.filesystem.exclusions import (
    DefaultExclusionFilter,
    ExactPattern,
    ExclusionFilter,
    ExtensionPattern,
    GitignorePattern,
    GlobPattern,
    NoExclusions,
    PatternType,
    RegexPattern,
)
from file_explorer.types.protocols import Exclusions


class TestGlobPattern:
    """Test the GlobPattern class."""

    def test_glob_pattern_basic_match(self) -> None:
        pattern = GlobPattern("*.txt")

        assert pattern.matches(Path("file.txt"))
        assert not pattern.matches(Path("file.py"))
        assert not pattern.matches(Path("file.TXT"))  # Case sensitive by default

    def test_glob_pattern_case_insensitive(self) -> None:
        pattern = GlobPattern("*.txt", case_sensitive=False)

        assert pattern.matches(Path("file.txt"))
        assert pattern.matches(Path("file.TXT"))
        assert not pattern.matches(Path("file.py"))

    def test_glob_pattern_matches_name_only(self) -> None:
        pattern = GlobPattern("test*")

        assert pattern.matches(Path("/srv/data/test123"))
        assert not pattern.matches(Path("/srv/test/data"))

    def test_glob_pattern_question_mark_and_brackets(self) -> None:
        assert GlobPattern("file?.txt").matches(Path("file1.txt"))
        assert not GlobPattern("file?.txt").matches(Path("file12.txt"))
        assert GlobPattern("file[0-9].txt").matches(Path("file9.txt"))
        assert not GlobPattern("file[0-9].txt").matches(Path("filea.txt"))


class TestRegexPattern:
    """Test the RegexPattern class."""

    def test_regex_pattern_searches_name(self) -> None:
        pattern = RegexPattern(r"\.txt$")

        assert pattern.matches(Path("dir/file.txt"))
        assert not pattern.matches(Path("file.txt.bak"))

    def test_regex_pattern_case_insensitive(self) -> None:
        pattern = RegexPattern(r"^temp_\d{3}\.log$", case_sensitive=False)

        assert pattern.matches(Path("TEMP_123.LOG"))
        assert not pattern.matches(Path("temp_12.log"))


class TestExtensionPattern:
    """Test the ExtensionPattern class."""

    def test_extension_pattern_with_and_without_dot(self) -> None:
        assert ExtensionPattern(".txt").matches(Path("file.txt"))
        assert ExtensionPattern("txt").matches(Path("file.txt"))
        assert not ExtensionPattern("txt").matches(Path("file.py"))

    def test_extension_pattern_case_insensitive(self) -> None:
        pattern = ExtensionPattern(".txt", case_sensitive=False)

        assert pattern.matches(Path("file.TXT"))

    def test_extension_pattern_last_suffix_only(self) -> None:
        pattern = ExtensionPattern(".gz")

        assert pattern.matches(Path("file.tar.gz"))
        assert not pattern.matches(Path("file.tar"))

    def test_extension_pattern_does_not_touch_filesystem(self) -> None:
        pattern = ExtensionPattern(".txt")

        with patch.object(Path, "is_dir", side_effect=AssertionError("filesystem access")):
            assert pattern.matches(Path("/nowhere/file.txt"))


class TestExactPattern:
    """Test the ExactPattern class."""

    def test_exact_pattern_basic_match(self) -> None:
        pattern = ExactPattern("config.ini")

        assert pattern.matches(Path("/etc/app/config.ini"))
        assert not pattern.matches(Path("myconfig.ini"))

    def test_exact_pattern_case_insensitive(self) -> None:
        pattern = ExactPattern("config.ini", case_sensitive=False)

        assert pattern.matches(Path("Config.Ini"))

    def test_exact_pattern_special_chars_are_literal(self) -> None:
        pattern = ExactPattern("test[1].txt")

        assert pattern.matches(Path("test[1].txt"))
        assert not pattern.matches(Path("test1.txt"))


class TestGitignorePattern:
    """Test the GitignorePattern class."""

    def test_gitignore_pattern_basic_match(self) -> None:
        pattern = GitignorePattern("*.log")

        assert pattern.matches(Path("/var/test.log"))
        assert not pattern.matches(Path("test.txt"))

    def test_gitignore_pattern_question_mark(self) -> None:
        pattern = GitignorePattern("test?")

        assert pattern.matches(Path("test1"))
        assert not pattern.matches(Path("test"))
        assert not pattern.matches(Path("test12"))

    def test_gitignore_pattern_trailing_slash(self) -> None:
        pattern = GitignorePattern("cache/")

        assert pattern.matches(Path("cache"))
        assert not pattern.matches(Path("cache.txt"))

    def test_gitignore_pattern_with_slash_matches_components(self) -> None:
        pattern = GitignorePattern("build/*.o")

        assert pattern.matches(Path("/src/build/main.o"))
        assert not pattern.matches(Path("/src/build/sub/main.o"))
        assert not pattern.matches(Path("/src/rebuild/main.o"))

    def test_gitignore_pattern_double_star(self) -> None:
        pattern = GitignorePattern("docs/**/*.pdf")

        assert pattern.matches(Path("/repo/docs/a/b/manual.pdf"))
        assert not pattern.matches(Path("/repo/docs/manual.txt"))

    def test_gitignore_pattern_dots_are_literal(self) -> None:
        pattern = GitignorePattern("a.b")

        assert pattern.matches(Path("a.b"))
        assert not pattern.matches(Path("axb"))

    def test_gitignore_double_star_matches_zero_directories(self) -> None:
        pattern = GitignorePattern("a/**/b")

        assert pattern.matches(Path("/r/a/b"))
        assert pattern.matches(Path("/r/a/x/y/b"))
        assert not pattern.matches(Path("/r/ab"))

    def test_gitignore_leading_double_star(self) -> None:
        pattern = GitignorePattern("**/logs")

        assert pattern.matches(Path("logs"))
        assert pattern.matches(Path("/srv/app/logs"))
        assert not pattern.matches(Path("/srv/app/logs.txt"))

    def test_gitignore_trailing_double_star(self) -> None:
        pattern = GitignorePattern("cache/**")

        assert pattern.matches(Path("/repo/cache/a/b.bin"))
        assert not pattern.matches(Path("/repo/cache"))

    def test_gitignore_negation_rejected(self) -> None:
        with pytest.raises(ValueError, match="Negated gitignore patterns"):
            _ = GitignorePattern("!keep.log")

    def test_gitignore_escaped_bang_is_literal(self) -> None:
        pattern = GitignorePattern("\\!important")

        assert pattern.matches(Path("!important"))
        assert not pattern.matches(Path("important"))


class TestNoExclusions:
    """Test the NoExclusions policy."""

    def test_excludes_nothing(self) -> None:
        policy = NoExclusions()

        assert not policy.is_excluded(Path("/"))
        assert not policy.is_excluded(Path(".git"))

    def test_satisfies_protocol(self) -> None:
        assert isinstance(NoExclusions(), Exclusions)


class TestExclusionFilter:
    """Test the ExclusionFilter class."""

    def test_empty_filter(self) -> None:
        exclusions = ExclusionFilter()

        assert exclusions.pattern_count == 0
        assert not exclusions.is_excluded(Path("test.txt"))

    def test_satisfies_protocol(self) -> None:
        assert isinstance(ExclusionFilter(), Exclusions)

    def test_add_pattern_defaults_to_glob(self) -> None:
        exclusions = ExclusionFilter()
        exclusions.add_pattern("*.txt")

        assert exclusions.pattern_count == 1
        assert exclusions.is_excluded(Path("test.txt"))
        assert not exclusions.is_excluded(Path("test.py"))

    def test_add_pattern_accepts_string_type(self) -> None:
        exclusions = ExclusionFilter()
        exclusions.add_pattern("config.ini", "exact")  # pyright: ignore[reportArgumentType]

        assert exclusions.is_excluded(Path("config.ini"))

    def test_add_pattern_rejects_unknown_type(self) -> None:
        exclusions = ExclusionFilter()

        with pytest.raises(ValueError):
            exclusions.add_pattern("x", "bogus")  # pyright: ignore[reportArgumentType]

    def test_mixed_patterns(self) -> None:
        exclusions = ExclusionFilter()
        exclusions.add_pattern("*.txt", PatternType.GLOB)
        exclusions.add_pattern(r"temp_\d+\.log", PatternType.REGEX)
        exclusions.add_pattern("config.ini", PatternType.EXACT)
        exclusions.add_extensions(["bak"])
        exclusions.add_gitignore_patterns(["dist/"])

        assert exclusions.pattern_count == 5
        assert exclusions.is_excluded(Path("test.txt"))
        assert exclusions.is_excluded(Path("temp_123.log"))
        assert exclusions.is_excluded(Path("config.ini"))
        assert exclusions.is_excluded(Path("old.bak"))
        assert exclusions.is_excluded(Path("dist"))
        assert not exclusions.is_excluded(Path("test.py"))

    def test_negated_gitignore_pattern_rejected(self) -> None:
        exclusions = ExclusionFilter()

        with pytest.raises(ValueError):
            exclusions.add_gitignore_patterns(["*.log", "!keep.log"])

        # Patterns added before the negation still apply
        assert exclusions.is_excluded(Path("debug.log"))

    def test_case_insensitive_filter(self) -> None:
        exclusions = ExclusionFilter(case_sensitive=False)
        exclusions.add_glob_patterns(["*.TXT"])

        assert exclusions.is_excluded(Path("test.txt"))

    def test_add_paths_excludes_subtree(self) -> None:
        exclusions = ExclusionFilter()
        exclusions.add_paths(["/srv/data/private"])

        assert exclusions.is_excluded(Path("/srv/data/private"))
        assert exclusions.is_excluded(Path("/srv/data/private/a/b.txt"))
        assert not exclusions.is_excluded(Path("/srv/data/private-notes"))
        assert not exclusions.is_excluded(Path("/srv/data"))
        assert exclusions.excluded_paths == frozenset({Path("/srv/data/private")})

    def test_adding_after_compile_recompiles(self) -> None:
        exclusions = ExclusionFilter()
        exclusions.add_glob_patterns(["*.a"])
        exclusions.compile()
        exclusions.add_glob_patterns(["*.b"])

        assert exclusions.is_excluded(Path("x.b"))

    def test_clear(self) -> None:
        exclusions = ExclusionFilter()
        exclusions.add_patterns(["*.txt", "*.log"])
        exclusions.add_paths(["/tmp/x"])

        exclusions.clear()

        assert exclusions.pattern_count == 0
        assert not exclusions.is_excluded(Path("test.txt"))
        assert not exclusions.is_excluded(Path("/tmp/x"))


class TestDefaultExclusionFilter:
    """Test the preloaded default exclusions."""

    @pytest.mark.parametrize(
        "name",
        [".git", "node_modules", "__pycache__", ".venv", ".DS_Store", "Thumbs.db", "edit.swp", "scratch.tmp"],
    )
    def test_common_noise_excluded(self, name: str) -> None:
        assert DefaultExclusionFilter().is_excluded(Path("/repo") / name)

    @pytest.mark.parametrize("name", ["main.py", "README.md", "gitignore", "modules"])
    def test_regular_files_kept(self, name: str) -> None:
        assert not DefaultExclusionFilter().is_excluded(Path("/repo") / name)

    def test_defaults_can_be_extended(self) -> None:
        exclusions = DefaultExclusionFilter()
        before = exclusions.pattern_count
        exclusions.add_exact_names(["vendor"])

        assert exclusions.pattern_count == before + 1
        assert exclusions.is_excluded(Path("vendor"))
