"""Modelos y entidades del dominio RRHH.

Por qué:
- Aquí viven los registros tipados (Pydantic v2), el modo de formulario y el
  catálogo de mensajes.
- El dominio no conoce HTTP, CLI, ni SDKs: solo conceptos del problema.
"""
