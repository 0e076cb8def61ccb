"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) para lo que un front web resuelve con el
  navegador: navegación, notificaciones y confirmaciones.
- Permite que la CLI y los tests inyecten implementaciones propias.
"""
