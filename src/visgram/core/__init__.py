"""
Core package aggregator for visgram contracts (grammar, schemas, errors, hashing/serde, typing).

## Contracts (single source of truth)
- Grammar: property states, scale names, scale data types, mark types, and the
  translation helpers to backend vocabularies.
- Schema: pydantic models of the resolved output spec.
- Errors: builder and resolver exceptions.
- Hashing/Serde: canonical JSON, fingerprints and spec digests.
- Constants: option defaults and default scale ranges.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.

## Downstream usage
- visgram.props / visgram.vis: parse property keys and mark types with `grammar`.
- visgram.reactive: identities from `hashing.fingerprint`.
- visgram.resolve: builds `schema.VisSpec`; default ranges from `constants`.
- visgram.io: persists and validates `schema.VisSpec` via `serde`.

## Examples
```python
from visgram.core.grammar import prop_to_scale, scaletype_to_vega_scaletype
prop_to_scale(["x2", "strokeOpacity"])  # ['x', 'opacity']
scaletype_to_vega_scaletype("datetime")  # 'time'
```
"""
