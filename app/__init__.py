# -*- coding: utf-8 -*-
"""
Memorial Studio Application Core Module
"""

from .config import Config

__all__ = ["Config"]
