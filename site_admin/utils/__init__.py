# -*- coding: utf-8 -*-
"""Вспомогательные функции бэкенда."""
