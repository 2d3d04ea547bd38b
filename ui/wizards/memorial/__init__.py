# -*- coding: utf-8 -*-
"""
Memorial Wizard Package.

This package contains:
- MemorialContext: Wizard context wrapping the memorial draft
- render_preview: Read-only preview of the draft
- WizardPrompts / DialogPrompts: Resume and exit questions
"""

from .memorial_context import MemorialContext
from .preview import MemorialPreview, render_preview, render_text
from .prompts import DialogPrompts, ExitAction, WizardPrompts

__all__ = [
    'MemorialContext',
    'MemorialPreview',
    'render_preview',
    'render_text',
    'DialogPrompts',
    'ExitAction',
    'WizardPrompts',
]
