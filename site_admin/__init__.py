# -*- coding: utf-8 -*-
"""
Бэкенд администрирования сайта.

REST API для управления клиентами, командами, сотрудниками,
галереей и обращениями посетителей.
"""

__version__ = "1.0.0"
