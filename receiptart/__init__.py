"""Receipt Art bill processing core.

Redacts bill photos with two independent blur layers, exports the
baked composites, and extracts merchant, total, and line items from
OCR text of the same photo.
"""
