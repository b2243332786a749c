"""
Тесты рендерера шаблонов.

Проверяет вывод переменных, наследование (extends/block),
включения, циклы с forloop, условия и диагностику ошибок рендеринга.
"""

import pytest

from alexi.template.context import TemplateContext
from alexi.template.errors import TemplateNotFoundError, TemplateParseError, TemplateRenderError
from alexi.template.loaders import MemoryTemplateLoader
from alexi.template.renderer import TemplateRenderer, format_value, render, render_string


def _loader(**templates: str) -> MemoryTemplateLoader:
    return MemoryTemplateLoader(templates)


class TestVariables:

    @pytest.mark.asyncio
    async def test_variable_output(self):
        out = await render_string("Hello {{ user.name }}!", {"user": {"name": "Ann"}}, _loader())
        assert out == "Hello Ann!"

    @pytest.mark.asyncio
    async def test_missing_variable_renders_empty(self):
        out = await render_string("[{{ nope.deeper }}]", {}, _loader())
        assert out == "[]"

    @pytest.mark.asyncio
    async def test_superscript_index_renders_empty(self):
        out = await render_string("[{{ items.\u00b2 }}]", {"items": ["a"]}, _loader())
        assert out == "[]"

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (3.0, "3"),
        (2.5, "2.5"),
        ("text", "text"),
    ])
    def test_format_value(self, value, expected):
        assert format_value(value) == expected

    @pytest.mark.asyncio
    async def test_comment_renders_nothing(self):
        assert await render_string("a{# hidden #}b", {}, _loader()) == "ab"

    @pytest.mark.asyncio
    async def test_unknown_tag_is_kept(self):
        assert await render_string("{% load static %}", {}, _loader()) == "{% load static %}"


class TestInheritance:

    @pytest.mark.asyncio
    async def test_simple_extends(self, memory_loader):
        memory_loader.register("child", '{% extends "base" %}{% block content %}hi{% endblock %}')

        assert await render("child", {}, memory_loader) == "beforehiafter"

    @pytest.mark.asyncio
    async def test_parent_default_block(self, memory_loader):
        memory_loader.register("child", '{% extends "base" %}')

        assert await render("child", {}, memory_loader) == "beforedefaultafter"

    @pytest.mark.asyncio
    async def test_text_outside_blocks_in_child_is_ignored(self, memory_loader):
        memory_loader.register(
            "child",
            '\n  {% extends "base" %}ignored{% block content %}hi{% endblock %}ignored',
        )

        assert await render("child", {}, memory_loader) == "beforehiafter"

    @pytest.mark.asyncio
    async def test_multi_level_deepest_child_wins(self):
        loader = _loader(
            base="<{% block title %}base{% endblock %}|{% block body %}base-body{% endblock %}>",
            middle='{% extends "base" %}{% block title %}middle{% endblock %}{% block body %}middle-body{% endblock %}',
            leaf='{% extends "middle" %}{% block title %}leaf{% endblock %}',
        )

        assert await render("leaf", {}, loader) == "<leaf|middle-body>"

    @pytest.mark.asyncio
    async def test_overridden_block_sees_context(self, memory_loader):
        memory_loader.register("child", '{% extends "base" %}{% block content %}{{ title }}{% endblock %}')

        assert await render("child", {"title": "T"}, memory_loader) == "beforeTafter"

    @pytest.mark.asyncio
    async def test_extends_not_first_is_error(self, memory_loader):
        memory_loader.register("bad", 'text{% extends "base" %}')

        with pytest.raises(TemplateRenderError, match="must be the first tag"):
            await render("bad", {}, memory_loader)

    @pytest.mark.asyncio
    async def test_missing_parent_propagates(self):
        loader = _loader(child='{% extends "nowhere" %}')

        with pytest.raises(TemplateNotFoundError):
            await render("child", {}, loader)

    @pytest.mark.asyncio
    async def test_recursive_extends_hits_depth_limit(self):
        loader = _loader(loop='{% extends "loop" %}')

        with pytest.raises(TemplateRenderError, match="nesting deeper than 5"):
            await TemplateRenderer(loader, max_depth=5).render("loop", {})


class TestInclude:

    @pytest.mark.asyncio
    async def test_include_shares_context(self, memory_loader):
        memory_loader.register("page", 'x{% include "partial" %}y')

        assert await render("page", {"name": "N"}, memory_loader) == "x[N]y"

    @pytest.mark.asyncio
    async def test_include_inside_loop_sees_loop_variable(self, memory_loader):
        memory_loader.register("page", '{% for name in names %}{% include "partial" %}{% endfor %}')

        assert await render("page", {"names": ["a", "b"]}, memory_loader) == "[a][b]"

    @pytest.mark.asyncio
    async def test_include_is_reloaded_each_time(self):
        loader = _loader(page='{% include "part" %}', part="v1")
        renderer = TemplateRenderer(loader)

        assert await renderer.render("page") == "v1"
        loader.register("part", "v2")
        assert await renderer.render("page") == "v2"

    @pytest.mark.asyncio
    async def test_recursive_include_hits_depth_limit(self):
        loader = _loader(self_ref='{% include "self_ref" %}')

        with pytest.raises(TemplateRenderError):
            await TemplateRenderer(loader, max_depth=3).render("self_ref", {})

    @pytest.mark.asyncio
    async def test_parse_error_in_included_template_propagates(self):
        loader = _loader(page='{% include "broken" %}', broken="{% endif %}")

        with pytest.raises(TemplateParseError):
            await render("page", {}, loader)


class TestForLoop:

    @pytest.mark.asyncio
    async def test_iteration(self):
        out = await render_string("{% for n in notes %}{{ n.title }},{% endfor %}",
                                  {"notes": [{"title": "a"}, {"title": "b"}]}, _loader())
        assert out == "a,b,"

    @pytest.mark.asyncio
    async def test_forloop_first_last(self):
        source = (
            "{% for x in xs %}"
            "{% if forloop.first %}[{% endif %}"
            "{{ forloop.counter }}:{{ x }}"
            "{% if forloop.last %}]{% else %},{% endif %}"
            "{% endfor %}"
        )
        out = await render_string(source, {"xs": ["a", "b", "c"]}, _loader())
        assert out == "[1:a,2:b,3:c]"

    @pytest.mark.asyncio
    async def test_forloop_revcounters(self):
        source = "{% for x in xs %}{{ forloop.revcounter }}{{ forloop.revcounter0 }}{{ forloop.counter0 }} {% endfor %}"
        out = await render_string(source, {"xs": [1, 2]}, _loader())
        assert out == "210 101 "

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ctx", [{"xs": []}, {}, {"xs": "abc"}, {"xs": {"a": 1}}, {"xs": None}])
    async def test_empty_branch(self, ctx):
        out = await render_string("{% for x in xs %}{{ x }}{% empty %}none{% endfor %}", ctx, _loader())
        assert out == "none"

    @pytest.mark.asyncio
    async def test_empty_without_branch(self):
        assert await render_string("a{% for x in xs %}{{ x }}{% endfor %}b", {}, _loader()) == "ab"

    @pytest.mark.asyncio
    async def test_loop_variable_does_not_leak(self):
        out = await render_string("{% for x in xs %}{% endfor %}[{{ x }}]", {"xs": [1], "x": "outer"}, _loader())
        assert out == "[outer]"

    @pytest.mark.asyncio
    async def test_nested_loops(self):
        source = "{% for row in rows %}{% for c in row %}{{ c }}{% endfor %}|{% endfor %}"
        out = await render_string(source, {"rows": [[1, 2], [3]]}, _loader())
        assert out == "12|3|"

    @pytest.mark.asyncio
    async def test_caller_context_is_not_mutated(self):
        ctx = TemplateContext({"xs": [1, 2]})
        await render_string("{% for x in xs %}{{ x }}{% endfor %}", ctx, _loader())
        assert "x" not in ctx
        assert "forloop" not in ctx


class TestIf:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ctx,expected", [
        ({"status": "draft"}, "D"),
        ({"status": "published", "featured": True}, "F"),
        ({"status": "published"}, "P"),
    ])
    async def test_branches(self, ctx, expected):
        source = (
            "{% if status == 'draft' %}D"
            "{% elif featured %}F"
            "{% else %}P{% endif %}"
        )
        assert await render_string(source, ctx, _loader()) == expected

    @pytest.mark.asyncio
    async def test_no_branch_matches(self):
        assert await render_string("a{% if x %}b{% endif %}c", {}, _loader()) == "ac"

    @pytest.mark.asyncio
    async def test_not(self):
        assert await render_string("{% if not items %}empty{% endif %}", {"items": []}, _loader()) == "empty"

    @pytest.mark.asyncio
    async def test_if_inside_block_override(self, memory_loader):
        memory_loader.register(
            "child",
            '{% extends "base" %}{% block content %}{% if user %}hi {{ user }}{% endif %}{% endblock %}',
        )
        assert await render("child", {"user": "ann"}, memory_loader) == "beforehi annafter"


class TestRendererIsolation:

    @pytest.mark.asyncio
    async def test_renders_are_independent(self, memory_loader):
        memory_loader.register("child", '{% extends "base" %}{% block content %}{{ v }}{% endblock %}')
        renderer = TemplateRenderer(memory_loader)

        assert await renderer.render("child", {"v": 1}) == "before1after"
        assert await renderer.render("child", {"v": 2}) == "before2after"
        assert await renderer.render("base") == "beforedefaultafter"
