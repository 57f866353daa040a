import logging
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True)
class CameraSettings:
    source_url: str
    port: int
    timeout: float
    retries: int
    cache_ttl: float
    default_palette: str
    log_level: str

    @classmethod
    def from_env(cls) -> "CameraSettings":
        return cls(
            source_url=os.getenv("SOURCE_URL", "http://127.0.0.1:8080/capture/latest"),
            port=int(os.getenv("PORT", "5500")),
            timeout=float(os.getenv("SOURCE_TIMEOUT", "10.0")),
            retries=int(os.getenv("SOURCE_RETRIES", "2")),
            cache_ttl=float(os.getenv("CACHE_TTL", "5")),
            default_palette=os.getenv("DEFAULT_PALETTE", "grayscale"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


SETTINGS = CameraSettings.from_env()


# Index 0 is the darkest tone, index 3 the lightest, matching the sensor output.
PALETTES: Mapping[str, Tuple[Tuple[int, int, int], ...]] = MappingProxyType(
    {
        "grayscale": ((0, 0, 0), (85, 85, 85), (170, 170, 170), (255, 255, 255)),
        "dmg": ((15, 56, 15), (48, 98, 48), (139, 172, 15), (155, 188, 15)),
        "pocket": ((0, 0, 0), (82, 82, 82), (165, 165, 165), (255, 255, 255)),
        "light": ((0, 79, 59), (0, 105, 74), (0, 154, 113), (0, 181, 145)),
        "sepia": ((43, 26, 12), (112, 78, 46), (186, 145, 97), (242, 222, 184)),
        "cga": ((0, 0, 0), (255, 85, 255), (85, 255, 255), (255, 255, 255)),
    }
)


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger("pocketcam")
