#!/usr/bin/env python3
"""
Validate footprints.json and opening-assets.json
"""
import json
import sys
from pathlib import Path

CONFIG_DIR = Path(__file__).parent.parent / 'config'
EXPECTED_FOOTPRINT_COUNT = 6
EXPECTED_ASSET_LISTS = ['doors', 'windows']


def _load(name):
    config_path = CONFIG_DIR / name
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        print(f"✗ Invalid JSON: {e}")
    except FileNotFoundError:
        print(f"✗ File not found: {config_path}")
    return None


def validate_footprints():
    """Validate footprints.json"""
    print("Validating footprints.json...")
    data = _load('footprints.json')
    if data is None:
        return False

    entries = data.get('footprints')
    if not isinstance(entries, list):
        print("✗ Missing top-level 'footprints' list")
        return False

    if len(entries) != EXPECTED_FOOTPRINT_COUNT:
        print(f"⚠ Expected {EXPECTED_FOOTPRINT_COUNT} footprints, found {len(entries)}")

    invalid = {}
    names = set()
    for index, entry in enumerate(entries):
        name = entry.get('name', f'#{index}')
        if name in names:
            invalid.setdefault(name, []).append('duplicate name')
        names.add(name)

        rows = entry.get('rows')
        if not rows or not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
            invalid.setdefault(name, []).append('missing rows')
            continue
        if len({len(r) for r in rows}) != 1 or not rows[0]:
            invalid.setdefault(name, []).append('ragged or empty rows')
        if any(v not in (0, 1) for r in rows for v in r):
            invalid.setdefault(name, []).append('values must be 0 or 1')
        if not any(v == 1 for r in rows for v in r):
            invalid.setdefault(name, []).append('no occupied cells')

    if invalid:
        print(f"✗ Invalid footprints: {invalid}")
        return False
    print(f"✓ All {len(entries)} footprints valid")

    # Test loading with actual module
    try:
        sys.path.insert(0, str(Path(__file__).parent.parent))
        from internal.buildgen import footprints
        catalog = footprints.load_catalog(CONFIG_DIR / 'footprints.json')
        concave = [f.name for f in catalog if f.is_concave()]
        print(f"✓ Module loaded {len(catalog)} footprints ({len(concave)} concave)")
    except Exception as e:
        print(f"⚠ Could not test module loading: {e}")

    return True


def validate_opening_assets():
    """Validate opening-assets.json"""
    print("\nValidating opening-assets.json...")
    data = _load('opening-assets.json')
    if data is None:
        return False

    missing = [k for k in EXPECTED_ASSET_LISTS if not isinstance(data.get(k), list)]
    if missing:
        print(f"✗ Missing asset lists: {missing}")
        return False
    print("✓ Door and window lists present")

    invalid = {}
    for key in EXPECTED_ASSET_LISTS:
        if not data[key]:
            print(f"⚠ '{key}' is empty, that opening kind will never be placed")
        for entry in data[key]:
            asset_id = entry.get('id')
            if not asset_id:
                invalid.setdefault(key, []).append('entry without id')
                continue
            for dim in ('height', 'depth'):
                value = entry.get(dim)
                if not isinstance(value, (int, float)) or value <= 0:
                    invalid.setdefault(f'{key}.{asset_id}', []).append(f'invalid {dim}')

    if invalid:
        print(f"✗ Invalid assets: {invalid}")
        return False
    print("✓ All assets have positive height and depth")
    return True


if __name__ == '__main__':
    success = True
    success &= validate_footprints()
    success &= validate_opening_assets()

    if success:
        print("\n✓ All validations passed!")
        sys.exit(0)
    else:
        print("\n✗ Some validations failed")
        sys.exit(1)
