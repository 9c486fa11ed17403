"""Tests for the model-output normalizer and its JSON extraction stages."""

import json

import pytest

from component_studio.services.code_normalizer import (
    STRATEGY_EMBEDDED_JSON,
    STRATEGY_FENCED,
    extract_embedded_json,
    iter_json_candidates,
    normalize,
    parse_model_output,
)


class TestCandidateScanner:
    """Balanced-brace scanning independent of parsing."""

    def test_spans_in_order_of_opening_brace(self):
        text = 'a {"x": {"y": 1}} b'
        spans = list(iter_json_candidates(text))
        assert text[slice(*spans[0])] == '{"x": {"y": 1}}'
        assert text[slice(*spans[1])] == '{"y": 1}'

    def test_braces_inside_strings_are_ignored(self):
        text = 'prefix {"jsx": "function A() { return <div>}</div>; }"} suffix'
        start, end = next(iter_json_candidates(text))
        assert json.loads(text[start:end])['jsx'].startswith('function A()')

    def test_escaped_quotes_do_not_end_strings(self):
        text = '{"css": "a::after { content: \\"}\\"; }"}'
        start, end = next(iter_json_candidates(text))
        assert (start, end) == (0, len(text))

    def test_greedy_span_is_last_candidate(self):
        text = 'x {"a": 1} y {"b": 2}'
        spans = list(iter_json_candidates(text))
        assert len(spans) == 3
        assert text[slice(*spans[-1])] == '{"a": 1} y {"b": 2}'

    def test_no_braces_yields_nothing(self):
        assert list(iter_json_candidates('plain prose')) == []


class TestEmbeddedJsonExtraction:

    def test_skips_unparseable_candidates(self):
        text = 'Use {count} in JSX. {"jsx": "x"}'
        data, start, _ = extract_embedded_json(text)
        assert data == {'jsx': 'x'}
        assert text[:start].strip() == 'Use {count} in JSX.'

    def test_non_object_json_is_not_accepted(self):
        assert extract_embedded_json('no objects [1, 2]') is None

    def test_empty_object_in_prose_is_skipped(self):
        raw = 'Attach it with `onClick={() => {}}` as a no-op.\n{"jsx": "function A(){ return null; }"}'
        output = parse_model_output(raw, 'jsx')
        assert output.strategy == STRATEGY_EMBEDDED_JSON
        assert output.jsx == 'function A(){ return null; }'
        assert output.explanation == 'Attach it with `onClick={() => {}}` as a no-op.'

    def test_style_object_in_prose_is_skipped(self):
        raw = 'Use style={{"color": "red"}} for emphasis.\n{"jsx": "function B(){ return null; }", "css": ".a{}"}'
        output = parse_model_output(raw, 'jsx')
        assert output.jsx == 'function B(){ return null; }'
        assert output.css == '.a{}'
        assert output.explanation.startswith('Use style={{"color": "red"}}')

    def test_object_without_output_keys_is_not_accepted(self):
        assert extract_embedded_json('config {"color": "red"} here') is None


class TestParseStrategies:

    def test_embedded_json_keeps_preceding_text_as_explanation(self):
        raw = 'I built a card.\n{"jsx": "function Card(){}", "css": ".c{}", "description": "A card"}'
        output = parse_model_output(raw, 'jsx')
        assert output.strategy == STRATEGY_EMBEDDED_JSON
        assert output.explanation == 'I built a card.'
        assert output.jsx == 'function Card(){}'
        assert output.tsx == ''
        assert output.css == '.c{}'
        assert output.description == 'A card'

    def test_missing_fields_default_to_empty_strings(self):
        output = parse_model_output('Text {"tsx": "const A = () => null"}', 'tsx')
        assert output.jsx == ''
        assert output.css == ''
        assert output.description == ''

    def test_non_string_fields_are_treated_as_missing(self):
        output = parse_model_output('{"jsx": 42, "css": null, "tsx": "const B = 1"}', 'jsx')
        assert output.jsx == ''
        assert output.css == ''
        assert output.tsx == 'const B = 1'

    def test_dialect_named_key_is_used(self):
        output = parse_model_output('ok {"tsx": "const T = 1"}', 'tsx')
        assert output.tsx == 'const T = 1'

    def test_description_falls_back_to_explanation_field(self):
        output = parse_model_output('{"explanation": "Explains", "jsx": "const A = 1"}', 'jsx')
        assert output.description == 'Explains'
        assert output.explanation == 'Explains'

    def test_json_that_is_not_an_object_falls_through_to_prose(self):
        raw = json.dumps('not an object')
        output = parse_model_output(raw, 'jsx')
        assert output.strategy == STRATEGY_FENCED

    def test_fenced_block_becomes_dialect_code(self):
        raw = 'Here is a button.\n```jsx\nconst Button = () => <button>Hi</button>;\n```\nEnjoy!'
        output = parse_model_output(raw, 'jsx')
        assert output.strategy == STRATEGY_FENCED
        assert output.jsx == 'const Button = () => <button>Hi</button>;'
        assert output.tsx == ''
        assert 'const Button' not in output.explanation
        assert output.explanation.startswith('Here is a button.')
        assert output.description == 'Generated component'

    def test_fenced_block_for_tsx_dialect(self):
        raw = '```tsx\nexport default function A() { return null; }\n```'
        output = parse_model_output(raw, 'tsx')
        assert output.tsx == 'export default function A() { return null; }'
        assert output.jsx == ''

    def test_markup_without_declaration_is_wrapped(self):
        output = parse_model_output('```html\n<div>Hello</div>\n```', 'jsx')
        assert output.jsx == 'function GeneratedComponent() {\n  return (\n    <div>Hello</div>\n  );\n}'

    def test_prose_without_fence_is_used_as_code(self):
        output = parse_model_output('<p>Just markup</p>', 'jsx')
        assert output.jsx.startswith('function GeneratedComponent()')

    def test_empty_text_stays_empty(self):
        output = parse_model_output('', 'jsx')
        assert output.jsx == ''
        assert output.tsx == ''


class TestNormalize:

    def test_counter_scenario(self):
        raw = 'Here is a counter button.\n{"jsx":"function C(){return null;}"}'
        output = normalize(raw, 'jsx')
        assert output.jsx == 'function C(){return null;}'
        assert output.tsx
        assert 'React.FC' in output.tsx
        assert output.explanation == 'Here is a counter button.'

    @pytest.mark.parametrize('raw, dialect', [
        ('{"jsx": "function A() { return <div/>; }"}', 'jsx'),
        ('{"tsx": "const A: React.FC = () => { return <div/>; };"}', 'tsx'),
        ('```jsx\nfunction A() { return <div/>; }\n```', 'jsx'),
        ('```tsx\nconst A = (): JSX.Element => <div/>;\n```', 'tsx'),
    ])
    def test_one_dialect_derives_the_other(self, raw, dialect):
        output = normalize(raw, dialect)
        assert output.jsx
        assert output.tsx

    def test_renormalizing_a_normalized_bundle_is_stable(self):
        first = normalize('Intro text\n{"jsx": "function A(){return null;}", "css": "p{}", "description": "d"}', 'jsx')
        bundle = {
            'explanation': first.explanation,
            'jsx': first.jsx,
            'tsx': first.tsx,
            'css': first.css,
            'description': first.description,
        }
        second = normalize(json.dumps(bundle), 'jsx')
        assert (second.explanation, second.jsx, second.tsx, second.css, second.description) == (
            first.explanation, first.jsx, first.tsx, first.css, first.description,
        )

    def test_default_explanation_when_none_found(self):
        assert normalize('{"jsx": "const A = 1"}', 'jsx').explanation == 'Component generated successfully.'

    def test_preview_uses_requested_dialect(self):
        output = normalize('{"jsx": "function J(){return null;}", "tsx": "const T: React.FC = () => null;"}', 'tsx')
        assert 'const T' in output.preview
        assert 'function J' not in output.preview

    def test_empty_output_yields_placeholder_preview(self):
        output = normalize('', 'jsx')
        assert 'No Component Generated' in output.preview

    def test_unknown_dialect_falls_back_to_jsx(self):
        output = normalize('```\nconst A = () => null;\n```', 'vue')
        assert output.jsx == 'const A = () => null;'

    @pytest.mark.parametrize('raw', [
        None,
        '{',
        '}{',
        '```',
        '{"jsx": "unterminated',
        '\x00\x01 {{{{ }}}',
    ])
    def test_never_raises(self, raw):
        output = normalize(raw, 'jsx')
        assert output.preview
