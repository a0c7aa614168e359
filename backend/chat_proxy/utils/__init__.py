from chat_proxy.utils.exceptions import ProxyError
from chat_proxy.utils.message_helpers import attach_image, format_for_openai, to_data_url

__all__ = ["ProxyError", "attach_image", "format_for_openai", "to_data_url"]
