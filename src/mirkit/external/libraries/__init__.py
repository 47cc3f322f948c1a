"""Bundled library profiles."""

from .antd import AntdProfile
from .mui import MuiProfile

__all__ = ["AntdProfile", "MuiProfile"]
