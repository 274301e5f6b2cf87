from .page_data import FORMAT_VERSION, deserialize_page, serialize_page

__all__ = ["FORMAT_VERSION", "deserialize_page", "serialize_page"]
