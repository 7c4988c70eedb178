"""
Vision model profiles for the DashScope (阿里云百炼) OpenAI-compatible API.

Each profile bundles the upstream model id, sampling parameters and the
prompt sent alongside the drawing. Profiles are defined once at import time
and never mutated.
"""
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_MODEL = "qwen-vl-plus-latest"

# Used when a profile carries no prompt of its own
FALLBACK_PROMPT = "请猜测这幅画画的是什么？请用简短的中文回答。"


@dataclass(frozen=True)
class ModelProfile:
    name: str
    display_name: str
    description: str
    model: str
    temperature: float
    max_tokens: int
    prompt: Optional[str] = None

    @property
    def effective_prompt(self) -> str:
        return self.prompt or FALLBACK_PROMPT


@dataclass(frozen=True)
class ModelComparison:
    speed: int       # 1-5
    accuracy: int    # 1-5
    cost: int        # 1-5, higher = more expensive
    features: tuple[str, ...] = field(default_factory=tuple)


PROFILES: dict[str, ModelProfile] = {
    "qwen-vl-plus-latest": ModelProfile(
        name="qwen-vl-plus-latest",
        display_name="Qwen-VL Plus (最新版)",
        description="平衡性能和准确度，适合大多数场景",
        model="qwen-vl-plus-latest",
        temperature=0.7,
        max_tokens=100,
        prompt=(
            "请猜测这幅画画的是什么？请用简短的中文回答，只说出你认为画的是什么物体或场景，不需要解释。"
            "如果看不清楚，请根据轮廓和形状大胆猜测。"
        ),
    ),
    "qwen-vl-max-latest": ModelProfile(
        name="qwen-vl-max-latest",
        display_name="Qwen-VL Max (最强版)",
        description="最强识别能力，适合复杂图像",
        model="qwen-vl-max-latest",
        temperature=0.5,
        max_tokens=150,
        prompt="请仔细观察这幅画，分析其轮廓、形状和细节特征，猜测画的是什么。请用简洁的中文词语回答。",
    ),
    "qwen-vl-plus": ModelProfile(
        name="qwen-vl-plus",
        display_name="Qwen-VL Plus (标准版)",
        description="标准版本，性价比高",
        model="qwen-vl-plus",
        temperature=0.6,
        max_tokens=80,
        prompt="这是一幅简笔画，请猜测画的内容。用中文简短回答。",
    ),
    "qwen-vl-max": ModelProfile(
        name="qwen-vl-max",
        display_name="Qwen-VL Max (标准版)",
        description="高级版本，准确度更高",
        model="qwen-vl-max",
        temperature=0.4,
        max_tokens=120,
        prompt="分析这幅画的内容并猜测是什么。请给出最可能的答案，用中文回答。",
    ),
}

MODEL_COMPARISON: dict[str, ModelComparison] = {
    "qwen-vl-plus-latest": ModelComparison(speed=4, accuracy=4, cost=3, features=("快速响应", "准确度高", "支持中文")),
    "qwen-vl-max-latest": ModelComparison(speed=3, accuracy=5, cost=5, features=("最高准确度", "复杂图像识别", "详细分析")),
    "qwen-vl-plus": ModelComparison(speed=5, accuracy=3, cost=2, features=("响应极快", "基础识别", "成本低")),
    "qwen-vl-max": ModelComparison(speed=3, accuracy=4, cost=4, features=("准确度高", "稳定性好", "适合生产")),
}


def lookup_profile(name: str | None) -> ModelProfile | None:
    """Exact lookup. Returns None for unknown or empty names."""
    if not name:
        return None
    return PROFILES.get(name)


def resolve_profile(name: str | None, default: str | None = None) -> ModelProfile:
    """
    Resolve a requested profile name, never failing.

    Order: requested name → configured default (AI_MODEL) → DEFAULT_MODEL.
    """
    return lookup_profile(name) or lookup_profile(default) or PROFILES[DEFAULT_MODEL]
