import json
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union
from semantic_metrics.schemas.analysis import ResourceRecord

ContentExtractor = Callable[[Mapping[str, Any]], Iterable[Any]]

# Resource type -> function yielding the readable strings of its content
EXTRACTORS: Dict[str, ContentExtractor] = {}


def register(resource_type: str) -> Callable[[ContentExtractor], ContentExtractor]:
    """Registers an extraction function for a resource type.

    Args:
        resource_type (str): The resource type handled by the decorated function.

    Returns:
        Callable: Decorator storing the function in EXTRACTORS.
    """

    def decorator(func: ContentExtractor) -> ContentExtractor:
        EXTRACTORS[resource_type] = func
        return func

    return decorator


def supported_types() -> List[str]:
    return sorted(EXTRACTORS)


def extract(resource: Union[ResourceRecord, Mapping[str, Any]]) -> List[str]:
    """Extracts the readable text units of a resource.

    Never raises: unknown types, null content and missing or malformed fields
    all yield fewer (possibly zero) text units. Callers decide what an empty
    result means.

    Args:
        resource (Union[ResourceRecord, Mapping[str, Any]]): The resource record.

    Returns:
        List[str]: Stripped, non-empty text units in document order.
    """
    if isinstance(resource, ResourceRecord):
        resource_type, content = resource.type, resource.content
    else:
        resource_type, content = resource.get("type"), resource.get("content")

    extractor = EXTRACTORS.get(resource_type)
    if extractor is None:
        print(f"Warning: unsupported resource type '{resource_type}'")
        return []

    content = _coerce_content(content)
    if content is None:
        return []

    return [text.strip() for text in _strings(extractor(content)) if text.strip()]


def _coerce_content(content: Any) -> Optional[Mapping[str, Any]]:
    """Returns the content as a mapping, decoding JSON strings, or None."""
    if isinstance(content, str):
        try:
            content = json.loads(content)
        except ValueError:
            return None
    if isinstance(content, Mapping):
        return content
    return None


def _strings(values: Iterable[Any]) -> Iterable[str]:
    """Flattens a mix of strings and lists of strings, skipping anything else."""
    for value in values:
        if isinstance(value, str):
            yield value
        elif isinstance(value, (list, tuple)):
            yield from _strings(value)


def _items(value: Any) -> List[Mapping[str, Any]]:
    """Returns the mapping elements of a list field, or [] if it is not a list."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


@register("comprension")
def _extract_comprension(content: Mapping[str, Any]) -> Iterable[Any]:
    yield content.get("texto")
    for pregunta in _items(content.get("preguntas")):
        yield pregunta.get("pregunta")
        yield pregunta.get("opciones")
        yield pregunta.get("respuesta")


@register("escritura")
def _extract_escritura(content: Mapping[str, Any]) -> Iterable[Any]:
    yield content.get("descripcion")
    yield content.get("instrucciones")
    yield content.get("estructuraPropuesta")
    yield content.get("conectores")
    yield content.get("listaVerificacion")


@register("gramatica")
def _extract_gramatica(content: Mapping[str, Any]) -> Iterable[Any]:
    yield content.get("instrucciones")
    yield content.get("ejemplo")
    for item in _items(content.get("items")):
        yield item.get("consigna")
        yield item.get("respuesta")


@register("oral")
def _extract_oral(content: Mapping[str, Any]) -> Iterable[Any]:
    yield content.get("descripcion")
    yield content.get("instruccionesDocente")
    yield content.get("guionEstudiante")
    yield content.get("preguntasOrientadoras")
    yield content.get("criteriosEvaluacion")


@register("drag_and_drop")
def _extract_drag_and_drop(content: Mapping[str, Any]) -> Iterable[Any]:
    for actividad in _items(content.get("actividades")):
        yield actividad.get("enunciado")
        yield actividad.get("opciones")
        yield actividad.get("respuesta")


@register("ice_breakers")
def _extract_ice_breakers(content: Mapping[str, Any]) -> Iterable[Any]:
    for actividad in _items(content.get("actividades")):
        yield actividad.get("nombre")
        yield actividad.get("descripcion")
        yield actividad.get("instrucciones")

        especifico = actividad.get("contenidoEspecifico")
        if not isinstance(especifico, Mapping):
            continue
        for frase in _items(especifico.get("frases")):
            yield frase.get("template")
            yield frase.get("ejemplos")
        yield especifico.get("pistas")
