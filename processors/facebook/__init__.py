#!/usr/bin/env python3
"""
Facebook Processor Module

Handles Facebook "Download your information" archives, importing photos and
videos with their albums, captions, comments and reactions.
"""

from processors.facebook.processor import FacebookImportProcessor, get_processor

__all__ = ["FacebookImportProcessor", "get_processor"]
