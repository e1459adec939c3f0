"""Integration tests: generate real gem skeletons from the built-in template sets.

These run the full enable -> load -> derive -> directories -> files sequence
against the sets shipped in ``gemkiln/scaffolder/templates`` and check the
composed output.  No external processes are started.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from gemkiln.config import GeneratorOptions
from gemkiln.scaffolder import ProjectGenerator, default_registry


async def _generate(destination: Path, today, **options) -> ProjectGenerator:
    options.setdefault("authors", ["Ann Author"])
    generator = ProjectGenerator(
        GeneratorOptions(**options), default_registry(), quiet=True, today=today
    )
    await generator.generate(destination)
    return generator


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


@pytest.mark.integration
class TestDefaultGem:
    async def test_expected_tree(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today)

        expected = [
            ".document",
            ".gitignore",
            ".rspec",
            "ChangeLog.rdoc",
            "LICENSE.txt",
            "README.rdoc",
            "Rakefile",
            "acme.gemspec",
            "lib/acme.rb",
            "lib/acme/version.rb",
            "spec/acme_spec.rb",
            "spec/spec_helper.rb",
        ]
        produced = sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())
        assert produced == expected

    async def test_version_file(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today)
        assert _read(root / "lib" / "acme" / "version.rb") == (
            "module Acme\n"
            "  # acme version\n"
            '  VERSION = "0.1.0"\n'
            "end\n"
        )

    async def test_gemspec_layers_dependencies(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today, email="ann@example.com")
        gemspec = _read(root / "acme.gemspec")

        assert 'gem.name          = "acme"' in gemspec
        assert "gem.version       = Acme::VERSION" in gemspec
        assert 'gem.authors       = ["Ann Author"]' in gemspec
        assert 'gem.email         = "ann@example.com"' in gemspec
        assert 'gem.homepage      = "https://rubygems.org/gems/acme"' in gemspec
        assert gemspec.index("'rspec'") < gemspec.index("'rdoc'")

    async def test_ruby_quotes_written_verbatim(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today)
        assert "require 'rspec/core/rake_task'" in _read(root / "Rakefile")
        assert "gem.add_development_dependency 'rspec', '~> 3.0'" in _read(root / "acme.gemspec")
        assert "&#39;" not in _read(root / "acme.gemspec")

    async def test_metadata_not_html_escaped(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today, authors=["Pat O'Brien"], summary="A <gem> & co")
        gemspec = _read(root / "acme.gemspec")
        assert 'gem.summary       = "A <gem> & co"' in gemspec
        assert 'gem.authors       = ["Pat O\'Brien"]' in gemspec

    async def test_rakefile_tasks_in_enable_order(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today)
        rakefile = _read(root / "Rakefile")
        assert rakefile.startswith("# encoding: utf-8\n")
        assert rakefile.index("rspec/core/rake_task") < rakefile.index("rdoc/task")

    async def test_readme_and_changelog(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today, email="ann@example.com")
        readme = _read(root / "README.rdoc")
        assert readme.startswith("= acme\n")
        assert "ann at example.com" in readme
        assert "Copyright (c) 2024 Ann Author" in readme
        assert _read(root / "ChangeLog.rdoc").startswith("=== 0.1.0 / 2024-03-09\n")

    async def test_gitignore_from_base_only(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today)
        assert _read(root / ".gitignore") == "/doc/\n/pkg/\n"

    async def test_rspec_spec(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today)
        assert "describe Acme do" in _read(root / "spec" / "acme_spec.rb")


@pytest.mark.integration
class TestComposedGem:
    async def test_yard_markdown_bundler(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today, yard=True, markdown=True, bundler=True)

        assert (root / "README.md").is_file()
        assert (root / "ChangeLog.md").is_file()
        assert not (root / "README.rdoc").exists()
        assert (root / "Gemfile").is_file()
        assert "--markup markdown" in _read(root / ".yardopts")
        assert "ChangeLog.md" in _read(root / ".document")
        assert _read(root / ".gitignore") == (
            "/doc/\n/pkg/\n/Gemfile.lock\n/vendor/bundle/\n/.yardoc/\n"
        )

    async def test_yard_textile(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today, yard=True, textile=True)
        assert _read(root / "README.tt").startswith("h1. acme\n")
        assert "--markup textile" in _read(root / ".yardopts")

    async def test_test_unit_instead_of_rspec(self, tmp_path: Path, today):
        root = tmp_path / "acme"
        await _generate(root, today, test_unit=True)
        assert (root / "test" / "test_acme.rb").is_file()
        assert (root / "test" / "helper.rb").is_file()
        assert not (root / "spec").exists()
        assert "rake/testtask" in _read(root / "Rakefile")

    async def test_namespaced_gem(self, tmp_path: Path, today):
        root = tmp_path / "my_cool-gem"
        await _generate(root, today)

        assert (root / "lib" / "my_cool" / "gem.rb").is_file()
        assert _read(root / "lib" / "my_cool" / "gem" / "version.rb") == (
            "module MyCool\n"
            "  module Gem\n"
            "    # my_cool-gem version\n"
            '    VERSION = "0.1.0"\n'
            "  end\n"
            "end\n"
        )
        assert "describe MyCool::Gem do" in _read(root / "spec" / "my_cool-gem_spec.rb")

    async def test_installed_set_overrides_builtin_file(self, tmp_path: Path, today, isolated_home: Path):
        custom = isolated_home / "templates" / "house_style"
        custom.mkdir(parents=True)
        (custom / "Rakefile.j2").write_text("# house Rakefile for {{ name }}\n", encoding="utf-8")

        root = tmp_path / "acme"
        await _generate(root, today, templates=["house_style"])
        assert _read(root / "Rakefile") == "# house Rakefile for acme\n"
        # Everything else still comes from the built-in sets.
        assert (root / "acme.gemspec").is_file()


@pytest.mark.integration
class TestCurrentDirectory:
    async def test_generate_into_dot(self, tmp_path: Path, today, monkeypatch: pytest.MonkeyPatch):
        root = tmp_path / "acme"
        root.mkdir()
        monkeypatch.chdir(root)

        generator = await _generate(Path("."), today)
        assert generator.variables.name == "acme"
        assert (root / "acme.gemspec").is_file()
        assert (root / "lib" / "acme" / "version.rb").is_file()
        assert not (root / ".gemspec").exists()
