from .debug import safe_name, save_page_artifacts

__all__ = ["safe_name", "save_page_artifacts"]
