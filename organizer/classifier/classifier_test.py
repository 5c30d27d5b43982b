"""Tests for the pattern based bookmark classifier."""

import pytest

from classifier.category import (
    DocumentationCategory,
    PackageCategory,
    RepositoryCategory,
    TechnologyCategory,
)
from classifier.classifier import (
    BookmarkClassifier,
    build_search_text,
    classify,
    pattern_confidence,
)
from utils.config import (
    CategoryType,
    Config,
    DomainEntry,
    PatternEntry,
    get_minimal_config,
)


@pytest.fixture
def overlapping_config():
    """Two technologies that both match 'flask react' pages."""
    return Config(
        patterns=(
            PatternEntry(tech="python", patterns=("flask",)),
            PatternEntry(tech="react", patterns=("react",)),
        ),
        domains=(
            DomainEntry(domain="github.com", type=CategoryType.REPOSITORY, tech="git"),
            DomainEntry(domain="hub.com", type=CategoryType.DOCUMENTATION, tech="general"),
        ),
        reference_hash="",
    )


class TestScenarios:
    def test_github_repository(self):
        category = classify("https://github.com/acme/widget", "Widget Repo")
        assert category == RepositoryCategory(tech="git", confidence=0.8)
        assert category.type == "repository"

    def test_npm_package(self):
        category = classify("https://npmjs.com/package/left-pad", "left-pad")
        assert category == PackageCategory(tech="node", confidence=0.8)

    def test_react_tutorial(self):
        category = classify("https://example.com/react-tutorial", "Learn React and JSX")
        assert isinstance(category, TechnologyCategory)
        assert category.tech == "react"
        # "react" is the first pattern found and occurs twice
        assert category.confidence == pytest.approx(0.6)


class TestTechnologyMatching:
    def test_confidence_is_capped(self):
        category = classify(
            "https://python.org/python", "Python python python python"
        )
        assert category.tech == "python"
        assert category.confidence == pytest.approx(0.9)

    def test_single_occurrence(self):
        category = classify("https://example.com/guide", "Docker basics")
        assert category == TechnologyCategory(tech="docker", confidence=0.3)

    def test_title_is_case_insensitive(self):
        category = classify("https://example.com", "KUBERNETES operators")
        assert category.tech == "kubernetes"

    def test_first_listed_technology_wins(self, overlapping_config):
        category = classify(
            "https://example.com/react", "react react react flask", overlapping_config
        )
        assert category.tech == "python"
        assert category.confidence == pytest.approx(0.3)

    def test_technology_beats_domain(self):
        category = classify("https://github.com/django/django", "Django")
        assert category.type == "technology"
        assert category.tech == "python"


class TestDomainMatching:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://gitlab.com/acme/tool", RepositoryCategory(tech="git")),
            (
                "https://stackoverflow.com/questions/1",
                DocumentationCategory(tech="general"),
            ),
            (
                "https://developer.mozilla.org/en-US/docs/Web/HTTP",
                DocumentationCategory(tech="web"),
            ),
            ("https://pypi.org/project/requests", PackageCategory(tech="python")),
            ("https://packagist.org/packages/monolog", PackageCategory(tech="php")),
            ("https://rubygems.org/gems/rake", PackageCategory(tech="ruby")),
        ],
    )
    def test_known_domains(self, url, expected):
        assert classify(url, "") == expected

    def test_ruby_registry_is_a_package(self):
        category = classify("https://rubygems.org/gems/rake", "rake")
        assert category == PackageCategory(tech="ruby")

    def test_ruby_pages_still_classify_as_ruby(self):
        category = classify("https://guides.rubyonrails.org", "Ruby on Rails Guides")
        assert category == TechnologyCategory(tech="ruby", confidence=0.3)

    def test_domain_only_matches_url(self):
        assert classify("https://example.com/page", "mirror of github.com") is None

    def test_domain_table_order(self, overlapping_config):
        category = classify("https://github.com/x", "", overlapping_config)
        assert category.tech == "git"


class TestMisses:
    def test_unknown_bookmark(self):
        assert classify("https://example.com/recipes", "Banana bread") is None

    def test_empty_tables(self):
        assert classify("https://github.com/acme", "react", get_minimal_config()) is None

    def test_missing_title(self):
        assert classify("https://example.com/vue-router", None).tech == "vue"


def test_classify_is_pure():
    first = classify("https://example.com/react-tutorial", "Learn React and JSX")
    second = classify("https://example.com/react-tutorial", "Learn React and JSX")
    assert first == second


def test_pattern_confidence_bounds():
    assert pattern_confidence("nothing here", "react") == 0.0
    for count in range(1, 8):
        confidence = pattern_confidence(" ".join(["rust"] * count), "rust")
        assert 0 <= confidence <= 0.9


def test_build_search_text():
    assert build_search_text("HTTPS://A.COM", "Title") == "https://a.com title"


def test_bookmark_classifier_uses_its_config(overlapping_config):
    classifier = BookmarkClassifier(overlapping_config)
    assert classifier("https://example.com", "flask").tech == "python"
    assert classifier("https://example.com", "docker") is None
