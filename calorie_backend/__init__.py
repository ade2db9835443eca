# -*- coding: utf-8 -*-
"""Calorie/protein tracker backend (FastAPI)."""
