"""Codec Domain - Bounded Context for binding documents.

Encodes discovered assets into the portable export document and decodes
documents back into display-safe data transfer objects.

Example usage:
    from bindingmcp.domains.codec import (
        BindingTableReader,
        decode_document,
        encode_document,
    )

    text = encode_document([("registry: PlayerInput on Player", asset)])
    items = decode_document(text)
    print(items[0].source, items[0].data.maps[0].name)

    reader = BindingTableReader(sentinel_text)
    rows = reader.rows()
"""

from .encoder import (
    asset_to_dict,
    encode_action,
    encode_action_map,
    encode_asset,
    encode_asset_json,
    encode_binding,
    encode_document,
    escape,
)

from .models import (
    ActionDto,
    ActionMapDto,
    BindingDto,
    DocumentItem,
    InputActionAssetDto,
)

from .decoder import (
    decode_asset,
    decode_document,
)

from .lookup import (
    GAMEPAD_GROUP,
    KEYBOARD_GROUP,
    NOT_FOUND,
    BindingRow,
    BindingTableReader,
    find_binding_display,
    resolve_binding,
    strip_device_prefix,
)

__all__ = [
    # Encoding
    "asset_to_dict",
    "encode_action",
    "encode_action_map",
    "encode_asset",
    "encode_asset_json",
    "encode_binding",
    "encode_document",
    "escape",
    # Data transfer objects
    "ActionDto",
    "ActionMapDto",
    "BindingDto",
    "DocumentItem",
    "InputActionAssetDto",
    # Decoding
    "decode_asset",
    "decode_document",
    # Display lookups
    "GAMEPAD_GROUP",
    "KEYBOARD_GROUP",
    "NOT_FOUND",
    "BindingRow",
    "BindingTableReader",
    "find_binding_display",
    "resolve_binding",
    "strip_device_prefix",
]
