"""Client-side navigation for rendered documents."""

from src.navigation.config import NavigationConfig
from src.navigation.dom import Page
from src.navigation.navigator import DocumentNavigator

__all__ = ["DocumentNavigator", "NavigationConfig", "Page"]
