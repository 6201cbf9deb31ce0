# Pages package
from .home import render as home_render
from .importador import render as importador_render

__all__ = ['home_render', 'importador_render']
