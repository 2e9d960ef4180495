"""
Unit tests for error_handler module.
"""

from unittest.mock import patch, MagicMock

from schema_builder.error_handler import ErrorHandler, ErrorType
from schema_builder.schema_exceptions import InvalidIndexError, UnsupportedFormatError


class TestErrorHandler:
    """Test class for error handler."""

    def test_user_friendly_message_invalid_index(self):
        error = InvalidIndexError("fields", 3, 2)

        message = ErrorHandler._get_user_friendly_message(error, ErrorType.USER_INPUT)

        assert "no longer exists" in message

    def test_user_friendly_message_value_error(self):
        message = ErrorHandler._get_user_friendly_message(ValueError("bad"), ErrorType.USER_INPUT)

        assert "invalid input" in message.lower()

    def test_user_friendly_message_export(self):
        error = UnsupportedFormatError("xml", ["json", "yaml"])

        message = ErrorHandler._get_user_friendly_message(error, ErrorType.EXPORT)

        assert "export format" in message

    def test_user_friendly_message_unknown_type_uses_system(self):
        message = ErrorHandler._get_user_friendly_message(RuntimeError("x"), "unknown")

        assert "system error" in message.lower()

    @patch('streamlit.info')
    @patch('streamlit.error')
    def test_handle_error_shows_message_and_suggestions(self, mock_error, mock_info):
        error = InvalidIndexError("fields", 5, 2)

        ErrorHandler.handle_error(error, "remove field", ErrorType.USER_INPUT)

        mock_error.assert_called_once()
        info_messages = [c.args[0] for c in mock_info.call_args_list]
        assert "💡 **Recovery Options:**" in info_messages
        assert any("between 0 and 1" in m for m in info_messages)

    @patch('streamlit.info')
    @patch('streamlit.error')
    def test_handle_error_custom_message(self, mock_error, mock_info):
        ErrorHandler.handle_error(RuntimeError("boom"), "render", user_message="Custom")

        mock_error.assert_called_once_with("Custom")
        mock_info.assert_not_called()

    @patch('streamlit.expander')
    @patch('streamlit.code')
    @patch('streamlit.write')
    @patch('streamlit.error')
    def test_show_details(self, mock_error, mock_write, mock_code, mock_expander):
        mock_expander.return_value = MagicMock()

        ErrorHandler.handle_error(RuntimeError("boom"), "render", show_details=True)

        mock_expander.assert_called_once()
        assert any("RuntimeError" in c.args[0] for c in mock_write.call_args_list)

    def test_only_reported_error_types_are_defined(self):
        assert {ErrorType.USER_INPUT, ErrorType.EXPORT, ErrorType.SYSTEM} == {
            value for name, value in vars(ErrorType).items() if name.isupper()
        }
        assert not hasattr(ErrorHandler, "with_error_handling")
