"""Tests for chat message composition."""

import pytest

from component_studio.services.prompt_builder import build_messages, build_system_prompt, build_user_prompt


@pytest.mark.unit
class TestSystemPrompt:

    @pytest.mark.parametrize('dialect', ['jsx', 'tsx'])
    def test_names_requested_dialect(self, dialect):
        prompt = build_system_prompt(dialect)
        assert f'Always return valid {dialect.upper()} code' in prompt
        assert f'"{dialect}": "component code here"' in prompt

    def test_asks_for_default_export_and_no_imports(self):
        prompt = build_system_prompt('jsx')
        assert '`export default <ComponentName>;`' in prompt
        assert 'Do not import anything' in prompt

    def test_example_json_braces_survive_formatting(self):
        prompt = build_system_prompt('jsx')
        assert '"explanation": "A counter component with increment functionality"' in prompt
        assert 'interface CounterProps {}' in prompt


@pytest.mark.unit
class TestUserPrompt:

    def test_plain_prompt_is_unchanged(self):
        assert build_user_prompt('a button', 'jsx') == 'a button'

    def test_lists_attachments(self):
        text = build_user_prompt('use this mockup', 'jsx', attachments=[
            {'filename': '1700000000000-mock.png', 'original_name': 'mock.png', 'mimetype': 'image/png'},
            {'filename': 'notes.txt'},
        ])
        assert 'Attached files context:' in text
        assert '- mock.png (image/png)' in text
        assert '- notes.txt (unknown)' in text

    def test_includes_previous_code_in_requested_dialect(self):
        text = build_user_prompt('make it blue', 'tsx', previous_code={
            'jsx': 'function A() {}', 'tsx': 'const A: React.FC = () => null;', 'css': '.a { color: red; }',
        })
        assert 'Current component code:\nconst A: React.FC = () => null;' in text
        assert 'Current CSS:\n.a { color: red; }' in text
        assert 'function A() {}' not in text

    def test_previous_code_falls_back_to_other_dialect(self):
        text = build_user_prompt('again', 'tsx', previous_code={'jsx': 'function B() {}', 'tsx': ''})
        assert 'Current component code:\nfunction B() {}' in text

    def test_css_alone_is_not_context(self):
        text = build_user_prompt('again', 'jsx', previous_code={'jsx': '', 'tsx': '', 'css': '.x{}'})
        assert text == 'again'


@pytest.mark.unit
def test_build_messages_has_system_then_user():
    messages = build_messages('a card', 'jsx')
    assert [m['role'] for m in messages] == ['system', 'user']
    assert messages[1]['content'] == 'a card'
