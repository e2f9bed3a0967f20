# -*- coding: utf-8 -*-
"""Pydantic схемы запросов и ответов API."""
