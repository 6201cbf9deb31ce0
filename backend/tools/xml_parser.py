"""XML parser for NFe documents producing a generic attributed tree.

Uses lxml and local names so that the NFe namespace does not leak into the
tree keys. Repeated elements become lists, but an element occurring once is a
bare value; callers that expect a sequence must go through ``normalize_list``.
"""
from lxml import etree
from typing import Dict, Any, List, Union
import logging

from .field_coercion import coerce_leaf

logger = logging.getLogger(__name__)

ATTRIBUTE_PREFIX = '@_'
TEXT_KEY = '#text'


class ParseError(ValueError):
    """Raised when the uploaded document is not well-formed XML."""


def _local_name(node) -> str:
    return etree.QName(node).localname


def _to_bytes(xml: Union[str, bytes]) -> bytes:
    if isinstance(xml, bytes):
        return xml
    if isinstance(xml, str):
        return xml.encode('utf-8')
    raise ParseError(f'Expected str or bytes input, got {type(xml).__name__}')


def _is_utf8(data: bytes) -> bool:
    try:
        data.decode('utf-8')
        return True
    except UnicodeDecodeError:
        return False


def parse_xml_string(xml: Union[str, bytes]):
    """Parse raw XML text and return the lxml root element.

    Raises:
        ParseError: if the content is empty or not well-formed.
    """
    data = _to_bytes(xml).strip()
    if not data:
        raise ParseError('Documento XML vazio')

    # lxml refuses str input with an encoding declaration, so always feed bytes
    encoding = None
    if not _is_utf8(data):
        # arquivos antigos gerados em Latin-1
        logger.info('Documento não está em UTF-8, lendo como Latin-1')
        encoding = 'iso-8859-1'
    try:
        parser = etree.XMLParser(
            remove_blank_text=True, remove_comments=True, resolve_entities=False, encoding=encoding
        )
        return etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as e:
        raise ParseError(f'XML syntax error: {e}') from e
    except (LookupError, ValueError) as e:
        # codificação desconhecida ou conteúdo recusado pelo lxml
        raise ParseError(f'Erro ao ler XML: {e}') from e


def element_to_tree(element) -> Any:
    """Convert an lxml element into nested dicts/lists/leaf values."""
    children = [child for child in element if isinstance(child.tag, str)]
    attributes = {
        f'{ATTRIBUTE_PREFIX}{etree.QName(name).localname}': value
        for name, value in element.attrib.items()
    }

    if not children:
        value = coerce_leaf(_local_name(element), element.text)
        if attributes:
            attributes[TEXT_KEY] = value
            return attributes
        return value

    tree: Dict[str, Any] = dict(attributes)
    for child in children:
        name = _local_name(child)
        value = element_to_tree(child)
        if name not in tree:
            tree[name] = value
        elif isinstance(tree[name], list):
            tree[name].append(value)
        else:
            tree[name] = [tree[name], value]
    return tree


def parse_document(xml: Union[str, bytes]) -> Dict[str, Any]:
    """Parse ``xml`` and return ``{root_local_name: tree}``."""
    root = parse_xml_string(xml)
    return {_local_name(root): element_to_tree(root)}


def normalize_list(node: Any) -> List[Any]:
    """Garante uma sequência: lista intacta, ``None`` vazio, escalar embrulhado."""
    if node is None:
        return []
    if isinstance(node, list):
        return node
    return [node]
