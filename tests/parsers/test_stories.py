"""Tests for Storybook story parsing."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from madeindex.parsers.stories import (
    StoryParser,
    component_name_from_path,
    find_story_files,
    humanize_story_name,
)
from tests._fixtures import samples
from tests._fixtures.repo_builder import DesignRepoBuilder


def _button():
    parser = StoryParser()
    component = parser.parse_source(samples.BUTTON_STORY, "stories/components/button/Button.stories.ts")
    assert component is not None
    return component


def test_csf_story_file_yields_component() -> None:
    component = _button()

    assert component.name == "Button"
    assert component.description == "Buttons trigger actions."
    assert component.tags == ["components", "button", "autodocs", "actions"]
    assert component.a11y_notes == ["Buttons must have an accessible name"]
    assert [example.title for example in component.examples] == ["Primary", "Secondary", "Large"]
    assert component.examples[0].description == "Primary story variant"
    assert component.examples[2].props == {"variant": "primary", "size": "lg", "label": "Continue"}


def test_story_markup_is_rendered_from_meta_render() -> None:
    component = _button()

    first = component.examples[0].html
    assert first.startswith('<button class="made-btn made-btn-primary"')
    assert ">Save</button>" in first
    assert "made-btn-secondary" in component.examples[1].html
    assert component.html_scaffold == first
    assert component.css_classes == ["made-btn", "made-btn-primary", "made-btn-secondary"]
    assert component.css_vars_used == ["--made-color-primary-500"]


def test_arg_types_feed_variants_and_props() -> None:
    component = _button()

    assert component.variants == {
        "variant": ["primary", "secondary", "ghost"],
        "size": ["sm", "md", "lg"],
    }
    assert component.props["variant"] == {
        "description": "Visual style",
        "options": ["primary", "secondary", "ghost"],
        "type": "select",
    }
    assert component.props["size"]["type"] == "radio"
    assert component.props["disabled"] == {"type": "boolean"}


def test_observed_variants_keep_first_seen_order() -> None:
    source = """
    export default { title: 'Button' };

    export const Primary = {
      args: { variant: 'primary', children: 'One' },
      render: (args) => `<button class="made-btn made-btn-${args.variant}">${args.children}</button>`,
    };

    export const Secondary = {
      args: { variant: 'secondary', children: 'Two' },
      render: (args) => `<button class="made-btn made-btn-${args.variant}">${args.children}</button>`,
    };
    """
    component = StoryParser().parse_source(source, "Button.stories.js")

    assert component is not None
    assert component.variants["variant"] == ["primary", "secondary"]
    assert "children" not in component.variants


def test_single_observed_value_is_not_a_variant_axis() -> None:
    source = """
    export default { title: 'Badge' };
    export const Info = {
      args: { tone: 'info' },
      render: (args) => `<span class="made-badge made-badge-${args.tone}">New</span>`,
    };
    """
    component = StoryParser().parse_source(source, "Badge.stories.js")

    assert component is not None
    assert component.variants == {}
    assert component.examples[0].html == '<span class="made-badge made-badge-info">New</span>'


def test_arrow_function_and_template_bind_stories() -> None:
    source = """
    export default { title: 'Forms/Input' };

    const Template = (args) => `<input class="made-input" placeholder="${args.placeholder}">`;

    export const Default = Template.bind({});
    Default.args = { placeholder: 'Email' };

    export const Inline = () => `<label class="made-label">Name <input class="made-input"></label>`;

    export const helper = () => `<div>not a story</div>`;
    """
    component = StoryParser().parse_source(source, "forms/Input.stories.js")

    assert component is not None
    assert component.name == "Input"
    assert [example.title for example in component.examples] == ["Default", "Inline"]
    assert component.examples[0].html == '<input class="made-input" placeholder="Email"/>'
    assert component.tags == ["forms"]


def test_jsx_story_is_converted_to_html() -> None:
    source = """
    export default { title: 'Components/Link' };

    export const Basic = {
      args: { href: '/docs' },
      render: (args) => (
        <a className="made-link" href={args.href} onClick={() => null} style={{ marginTop: 4 }}>
          Docs
        </a>
      ),
    };
    """
    component = StoryParser().parse_source(source, "Link.stories.tsx")

    assert component is not None
    html = component.examples[0].html
    assert 'class="made-link"' in html
    assert 'href="/docs"' in html
    assert "onClick" not in html
    assert 'style="margin-top: 4"' in html


def test_unparenthesized_jsx_render_keeps_story_args() -> None:
    source = """
    export default { title: 'Button' };

    export const Primary = {
      render: (args) => <button className="made-btn">{args.label}</button>,
      args: { label: 'Go', variant: 'primary' },
    };
    """
    component = StoryParser().parse_source(source, "Button.stories.jsx")

    assert component is not None
    assert component.examples[0].html == '<button class="made-btn">Go</button>'
    assert component.examples[0].props == {"label": "Go", "variant": "primary"}


def test_tagged_templates_and_render_methods() -> None:
    source = """
    export default { title: 'Badge', args: { tone: 'info' } };

    export const Tagged = {
      render: ({ tone }) => html`<span class="made-badge made-badge-${tone}">New</span>`,
    };

    export const Returned = {
      args: { tone: 'warning', dismissible: true },
      render(args) {
        const format = (value) => `<b>${value}</b>`;
        return `<span class="made-badge made-badge-${args.tone}">${args.dismissible ? 'x' : ''}</span>`;
      },
    };
    """
    component = StoryParser().parse_source(source, "Badge.stories.js")

    assert component is not None
    assert [example.html for example in component.examples] == [
        '<span class="made-badge made-badge-info">New</span>',
        '<span class="made-badge made-badge-warning">x</span>',
    ]
    assert component.variants == {"tone": ["info", "warning"]}


def test_mdx_fenced_blocks_become_examples() -> None:
    component = StoryParser().parse_source(samples.CARD_MDX, "stories/components/card/Card.stories.mdx")

    assert component is not None
    assert component.name == "Card"
    assert component.description == "Cards group related content and actions."
    assert component.a11y_notes == [
        'Use role="region" with aria-label="Card" when the card is a landmark'
    ]
    assert len(component.examples) == 1
    example = component.examples[0]
    assert example.title == "Example 1"
    assert example.description == "Basic card layout:"
    assert component.css_classes == ["made-card", "made-card-body", "made-card-title"]
    assert component.tags == ["components", "card"]


def test_mdx_story_blocks_are_collected() -> None:
    source = """
    <Meta title="Feedback/Alert" />

    <Story name="Info">
      <div className="made-alert made-alert-info" role="alert">Heads up</div>
    </Story>
    """
    component = StoryParser().parse_source(source, "Alert.stories.mdx")

    assert component is not None
    assert component.name == "Alert"
    assert [example.title for example in component.examples] == ["Story Example 1"]
    assert component.examples[0].description == "From Storybook Story component"
    assert 'class="made-alert made-alert-info"' in component.examples[0].html


def test_source_without_examples_or_title_is_skipped() -> None:
    assert StoryParser().parse_source("export const helper = 1;", "Empty.stories.js") is None


def test_declared_title_without_examples_still_yields_component() -> None:
    component = StoryParser().parse_source(samples.BROKEN_STORY, "Broken.stories.js")

    assert component is not None
    assert component.name == "Broken"
    assert component.examples == []
    assert component.html_scaffold == ""


def test_long_interactive_text_is_truncated_in_scaffold() -> None:
    source = """
    export default { title: 'Cta' };
    export const Long = () => `<button id="example-cta" class="made-btn">A very long call to action label</button>`;
    """
    component = StoryParser().parse_source(source, "Cta.stories.js")

    assert component is not None
    assert component.html_scaffold == '<button class="made-btn">...</button>'
    assert "example-cta" in component.examples[0].html


def test_parse_directory_skips_vendored_trees(repo_builder: DesignRepoBuilder) -> None:
    root = repo_builder.write_default()
    parser = StoryParser()

    components = parser.parse_directory(root)

    assert [component.name for component in components] == ["Button", "Card"]
    assert parser.find_component("button") is not None
    assert [component.name for component in parser.search_components("actions")] == ["Button", "Card"]


def test_parse_directory_accumulates_duplicates(repo_builder: DesignRepoBuilder) -> None:
    repo_builder.write(
        {
            "a/Button.stories.ts": samples.BUTTON_STORY,
            "b/Button.stories.ts": samples.BUTTON_STORY,
        }
    )
    parser = StoryParser()

    parser.parse_directory(repo_builder.path())

    assert [component.name for component in parser.components] == ["Button", "Button"]


def test_missing_directory_yields_no_components(tmp_path: Path) -> None:
    assert StoryParser().parse_directory(tmp_path / "absent") == []


def test_unreadable_story_file_is_skipped_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(logging.getLogger("madeindex"), "propagate", True)
    (tmp_path / "Broken.stories.js").write_bytes(b"export default { title: '\xff\xfe' };")
    (tmp_path / "Button.stories.ts").write_text(samples.BUTTON_STORY, encoding="utf-8")
    parser = StoryParser()

    with caplog.at_level(logging.WARNING, logger="madeindex"):
        components = parser.parse_directory(tmp_path)

    assert [component.name for component in components] == ["Button"]
    assert any(
        "Failed to parse story file" in record.getMessage() and "Broken.stories.js" in record.getMessage()
        for record in caplog.records
    )


def test_find_story_files_filters_by_suffix(repo_builder: DesignRepoBuilder) -> None:
    repo_builder.write(
        {
            "src/Button.stories.tsx": "",
            "src/Button.story.js": "",
            "src/Button.tsx": "",
            "node_modules/x/Thing.stories.js": "",
        }
    )

    found = [path.name for path in find_story_files(repo_builder.path())]

    assert found == ["Button.stories.tsx", "Button.story.js"]


def test_name_helpers() -> None:
    assert component_name_from_path("components/button-group.stories.tsx") == "Button Group"
    assert humanize_story_name("PrimaryLarge") == "Primary Large"
