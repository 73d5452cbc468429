"""
Sample laboratory product library used by the planner's drag source
"""

import json

# Sample products; dimensions are in millimetres
SAMPLE_PRODUCTS = {
    'fh-std': {
        'name': 'Standard Fume Hood',
        'category': 'Fume Hoods',
        'dimensions': {'length': 1500.0, 'width': 750.0, 'height': 2400.0},
        'color': '#ef4444',
    },
    'lab-bench': {
        'name': 'Lab Bench',
        'category': 'Lab Benches',
        'dimensions': {'length': 3000.0, 'width': 750.0, 'height': 850.0},
        'color': '#3b82f6',
    },
    'eye-wash': {
        'name': 'Eye Wash Station',
        'category': 'Safety Equipment',
        'dimensions': {'length': 600.0, 'width': 400.0, 'height': 1200.0},
        'color': '#10b981',
    },
    'storage': {
        'name': 'Storage Cabinet',
        'category': 'Storage',
        'dimensions': {'length': 1200.0, 'width': 600.0, 'height': 1800.0},
        'color': '#f59e0b',
    },
}

# Mime type of the drag payload
PRODUCT_MIME_TYPE = 'application/json'


def get_product_payload(product_id):
    """Catalog payload for ``product_id`` as dropped onto the canvas"""
    product = SAMPLE_PRODUCTS[product_id]
    return {
        'id': product_id,
        'name': product['name'],
        'category': product['category'],
        'dimensions': dict(product['dimensions']),
        'color': product['color'],
    }


def encode_product_payload(product_id):
    return json.dumps(get_product_payload(product_id))


def get_categories():
    return sorted({p['category'] for p in SAMPLE_PRODUCTS.values()})
