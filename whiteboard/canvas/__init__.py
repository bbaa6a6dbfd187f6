from .canvas import StrokeRenderer, RenderEngine
