"""Tests for the markup, code and style extraction strategies."""

from textwrap import dedent

from scanner.extractors import (
    extract_code_references,
    extract_markup_references,
    extract_style_references,
    is_local_reference,
)


class TestLocalReferences:
    """Tests for the local reference filter."""

    def test_local_specifiers(self):
        """Test relative, aliased and bare specifiers are local."""
        assert is_local_reference("./Foo.vue")
        assert is_local_reference("../utils/helper")
        assert is_local_reference("@/assets/logo.png")
        assert is_local_reference("images/bg.png")
        assert is_local_reference("/static/favicon.ico")

    def test_remote_references(self):
        """Test scheme-prefixed and protocol-relative URLs are rejected."""
        assert not is_local_reference("http://example.com/a.js")
        assert not is_local_reference("https://cdn.example.com/a.css")
        assert not is_local_reference("//cdn.example.com/a.css")
        assert not is_local_reference("data:image/png;base64,AAAA")
        assert not is_local_reference("mailto:someone@example.com")

    def test_package_directory(self):
        """Test references into node_modules are rejected."""
        assert not is_local_reference("../node_modules/lodash/index.js")
        assert not is_local_reference("node_modules/x/y.css")

    def test_fragments_and_interpolation(self):
        """Test fragments and interpolated values are rejected."""
        assert not is_local_reference("#gradient")
        assert not is_local_reference("{{ imageUrl }}")
        assert not is_local_reference("./img/${name}.png")
        assert not is_local_reference("")
        assert not is_local_reference("   ")

    def test_windows_drive_is_local(self):
        """Test a drive letter is not mistaken for a URL scheme."""
        assert is_local_reference("C:\\project\\a.js")


class TestMarkupStrategy:
    """Tests for template markup extraction."""

    def test_src_attributes(self):
        """Test static src attributes are extracted in order."""
        markup = dedent("""
            <div>
              <img src="@/assets/logo.png" alt="logo">
              <img src='./icons/close.svg'/>
            </div>
        """)
        assert extract_markup_references(markup) == ["@/assets/logo.png", "./icons/close.svg"]

    def test_bound_src_not_literal(self):
        """Test bound and prefixed attributes are not treated as paths."""
        markup = '<img :src="avatarUrl"><img v-bind:src="other"><img data-src="./lazy.png">'
        assert extract_markup_references(markup) == []

    def test_require_in_binding(self):
        """Test require calls inside bindings are extracted."""
        markup = """<img :src="require('../assets/banner.jpg')">"""
        assert extract_markup_references(markup) == ["../assets/banner.jpg"]

    def test_remote_sources_excluded(self):
        """Test remote and data sources are excluded."""
        markup = '<img src="https://example.com/a.png"><img src="data:image/gif;base64,R0l"><img src="//cdn/x.png">'
        assert extract_markup_references(markup) == []

    def test_empty_text(self):
        """Test empty markup yields nothing."""
        assert extract_markup_references("") == []


class TestCodeStrategy:
    """Tests for script import and require extraction."""

    def test_all_import_forms(self):
        """Test every static import form and require are recognized."""
        code = dedent("""
            import './polyfills'
            import Header from './Header.vue'
            import { formatDate, parseDate } from '../utils/date'
            import * as api from '@/api'
            import Store, { mapState } from '@/store/helpers'
            const config = require('./config.json')
        """)
        assert extract_code_references(code) == [
            "./polyfills",
            "./Header.vue",
            "../utils/date",
            "@/api",
            "@/store/helpers",
            "./config.json",
        ]

    def test_multiline_named_import(self):
        """Test named imports spanning several lines."""
        code = dedent("""
            import {
              a,
              b,
            } from './letters'
        """)
        assert extract_code_references(code) == ["./letters"]

    def test_type_imports_and_reexports(self):
        """Test TypeScript type imports and re-exports."""
        code = dedent("""
            import type { User } from './types'
            export { default as Button } from './Button.vue'
            export * from './icons'
        """)
        assert extract_code_references(code) == ["./types", "./Button.vue", "./icons"]

    def test_dynamic_import_literal(self):
        """Test lazily loaded components with literal paths."""
        code = "const Page = () => import('@/views/Page.vue')"
        assert extract_code_references(code) == ["@/views/Page.vue"]

    def test_dynamic_expression_ignored(self):
        """Test computed import paths are not extracted."""
        code = "const Page = () => import(`./views/${name}.vue`)\nrequire(base + '/x')"
        assert extract_code_references(code) == []

    def test_duplicate_imports_kept_per_position(self):
        """Test the same module imported twice appears twice (deduplicated later)."""
        code = "import { a } from './mod'\nimport * as mod from './mod'"
        assert extract_code_references(code) == ["./mod", "./mod"]

    def test_packages_are_returned_bare(self):
        """Test bare package names pass the locality filter."""
        code = "import Vue from 'vue'\nimport x from 'https://esm.sh/x'"
        assert extract_code_references(code) == ["vue"]


class TestStyleStrategy:
    """Tests for stylesheet extraction."""

    def test_imports_and_urls(self):
        """Test @import and url() references."""
        css = dedent("""
            @import './variables.scss';
            @import url("../base.css");
            .hero { background: url(../images/hero.jpg) no-repeat; }
            .icon { background-image: url('@/assets/icon.svg'); }
        """)
        assert extract_style_references(css) == [
            "./variables.scss",
            "../base.css",
            "../images/hero.jpg",
            "@/assets/icon.svg",
        ]

    def test_sass_module_rules(self):
        """Test @use and @forward rules."""
        scss = "@use 'sass:math';\n@use './mixins' as m;\n@forward \"./tokens\";"
        assert extract_style_references(scss) == ["./mixins", "./tokens"]

    def test_remote_and_inline_urls_excluded(self):
        """Test remote, data and fragment urls are excluded."""
        css = dedent("""
            @import 'https://fonts.googleapis.com/css?family=Roboto';
            .a { background: url(data:image/png;base64,AAAA); }
            .b { fill: url(#gradient); }
            .c { background: url(//cdn.example.com/x.png); }
        """)
        assert extract_style_references(css) == []
