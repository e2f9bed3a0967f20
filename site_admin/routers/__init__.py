# -*- coding: utf-8 -*-
"""API роутеры бэкенда сайта."""
