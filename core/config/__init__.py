# -*- coding: utf-8 -*-
from core.config.loader import ConfigLoader  # noqa: F401
