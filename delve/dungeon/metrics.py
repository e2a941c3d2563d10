from typing import Dict


def init_metrics(seed: int, depth: int) -> Dict[str, int | float | bool | dict]:
    return {
        'seed': seed,
        'depth': depth,
        'rooms_target': 0,
        'rooms_placed': 0,
        'room_fallback': False,
        'corridors': 0,
        'traps': 0,
        'secret_doors': 0,
        'stairs_distance': 0,
        'path_length': 0,
        'doors_target': 0,
        'doors_placed': 0,
        'doors_forced': False,
        'door_rejections': {},
        'monsters': 0,
        'runtime_ms': 0.0,
    }
