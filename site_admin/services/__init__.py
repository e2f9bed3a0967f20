# -*- coding: utf-8 -*-
"""Сервисы бэкенда."""
