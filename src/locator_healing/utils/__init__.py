"""
Utility subpackage for self‑healing.

Holds the cross‑cutting helpers: logging and the language model
clients used by the resolver.

```
from locator_healing.utils import get_logger, create_model_client
```
"""

from .logger import get_logger
from .llm_client import (
    ModelCallError,
    ModelClient,
    OllamaModelClient,
    OpenAIModelClient,
    create_model_client,
)

__all__ = [
    "get_logger",
    "ModelClient",
    "ModelCallError",
    "OpenAIModelClient",
    "OllamaModelClient",
    "create_model_client",
]
