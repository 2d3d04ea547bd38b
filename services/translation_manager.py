# -*- coding: utf-8 -*-
"""Centralized Translation Manager for i18n support."""

from typing import Callable, List

from services.translations.en import EN_TRANSLATIONS
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LANGUAGE = "en"


class TranslationManager:
    """Singleton Translation Manager."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._current_language = DEFAULT_LANGUAGE
            cls._instance._translations = {"en": EN_TRANSLATIONS}
            cls._instance._listeners: List[Callable] = []
        return cls._instance

    def register_language(self, lang_code: str, translations: dict):
        self._translations[lang_code] = translations

    def on_language_changed(self, callback: Callable):
        self._listeners.append(callback)

    def set_language(self, lang_code: str):
        if lang_code not in self._translations:
            lang_code = DEFAULT_LANGUAGE
        if self._current_language != lang_code:
            self._current_language = lang_code
            logger.info(f"Language changed to: {lang_code}")
            for callback in self._listeners:
                try:
                    callback(lang_code)
                except Exception as e:
                    logger.error(f"Language change callback error: {e}")

    def get_language(self) -> str:
        return self._current_language

    def tr(self, key: str, **kwargs) -> str:
        translation = self._translations.get(self._current_language, {}).get(key)
        if translation is None:
            translation = EN_TRANSLATIONS.get(key)
        if translation is None:
            return key
        if kwargs:
            try:
                translation = translation.format(**kwargs)
            except (KeyError, ValueError):
                pass
        return translation


_translator = TranslationManager()


def tr(key: str, **kwargs) -> str:
    return _translator.tr(key, **kwargs)


def set_language(lang_code: str):
    _translator.set_language(lang_code)


def get_language() -> str:
    return _translator.get_language()
