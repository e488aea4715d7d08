"""Shader loading and the swapchain-dependent resources of the raw-image renderer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from mcrawview.debuglog import log_to_file
from mcrawview.shader_params import SHADER_PARAMS_SIZE

SHADER_DIR_NAME = "shaders_spv"
VERTEX_SHADER_NAME = "fullscreen_quad.vert.spv"
FRAGMENT_SHADER_NAME = "image_process.frag.spv"

COMBINED_IMAGE_SAMPLER = "combined_image_sampler"
UNIFORM_BUFFER = "uniform_buffer"
FRAGMENT_STAGE = "fragment"


@dataclass(frozen=True)
class _LayoutBinding:
    """One binding of the descriptor set layout."""

    binding: int
    descriptor_type: str
    count: int
    stage: str
    size: Optional[int] = None


_LAYOUT: Tuple[_LayoutBinding, ...] = (
    _LayoutBinding(0, COMBINED_IMAGE_SAMPLER, 1, FRAGMENT_STAGE),
    _LayoutBinding(1, UNIFORM_BUFFER, 1, FRAGMENT_STAGE, SHADER_PARAMS_SIZE),
)


def read_shader(path: Union[str, Path]) -> bytes:
    """Return the bytes of a compiled shader; a missing or empty file is an error."""
    shader_path = Path(path)
    log_to_file(f"[VulkanHelpers::readFile] Attempting to read shader file: {shader_path}")
    try:
        code = shader_path.read_bytes()
    except OSError:
        log_to_file(f"[VulkanHelpers::readFile] ERROR: FAILED to open shader file: {shader_path}")
        raise
    log_to_file(f"[VulkanHelpers::readFile] Shader file {shader_path} size: {len(code)} bytes.")
    if not code:
        message = f"Shader file is EMPTY: {shader_path}"
        log_to_file(f"[VulkanHelpers::readFile] ERROR: {message}")
        raise ValueError(message)
    log_to_file(f"[VulkanHelpers::readFile] Successfully read shader file: {shader_path}")
    return code


def shader_paths(base_dir: Union[str, Path] = ".") -> Tuple[Path, Path]:
    """Paths of the vertex and fragment shaders below ``base_dir``."""
    shader_dir = Path(base_dir) / SHADER_DIR_NAME
    return shader_dir / VERTEX_SHADER_NAME, shader_dir / FRAGMENT_SHADER_NAME


def descriptor_pool_size(swap_chain_image_count: int) -> Dict[str, int]:
    """Descriptor counts and set limit for a pool serving the given swapchain.

    A swapchain without images still gets a pool sized for one set.
    """
    if swap_chain_image_count <= 0:
        log_to_file(
            "[Descriptor::createDescriptorPool] WARNING: m_swapChainImageCount is 0. "
            "Pool will be minimal."
        )
    count = swap_chain_image_count if swap_chain_image_count > 0 else 1
    return {COMBINED_IMAGE_SAMPLER: count, UNIFORM_BUFFER: count, "max_sets": count}


class SwapchainResources:
    """Pipeline shaders, uniform buffers and descriptor sets, one per swapchain image."""

    def __init__(self, base_dir: Union[str, Path] = ".") -> None:
        self.base_dir = Path(base_dir)
        self.image_count = 0
        self.vertex_shader: Optional[bytes] = None
        self.fragment_shader: Optional[bytes] = None
        self.uniform_buffers: List[bytearray] = []
        self.pool: Optional[Dict[str, int]] = None
        self.descriptor_sets: List[int] = []

    @property
    def pipeline_ready(self) -> bool:
        return self.vertex_shader is not None and self.fragment_shader is not None

    def recreate(self, swap_chain_image_count: int) -> None:
        """Release everything and build it again for ``swap_chain_image_count`` images."""
        log_to_file(
            f"[Renderer_VK::onSwapChainRecreated] Recreating for "
            f"{swap_chain_image_count} images."
        )
        self.image_count = swap_chain_image_count
        self.cleanup()

        vert_path, frag_path = shader_paths(self.base_dir)
        vertex = read_shader(vert_path)
        fragment = read_shader(frag_path)
        self.vertex_shader, self.fragment_shader = vertex, fragment
        log_to_file("[Pipeline::createGraphicsPipeline] Graphics pipeline created.")

        count = max(swap_chain_image_count, 0)
        self.uniform_buffers = [bytearray(SHADER_PARAMS_SIZE) for _ in range(count)]
        log_to_file(f"[Descriptor::createUniformBuffers] Creating {count} uniform buffers.")

        self.pool = descriptor_pool_size(count)
        self.descriptor_sets = list(range(count))
        log_to_file(
            f"[Descriptor::createDescriptorSets] Allocating {count} descriptor sets."
        )
        log_to_file(
            "[Renderer_VK::onSwapChainRecreated] Swapchain-dependent resources recreated."
        )

    def cleanup(self) -> None:
        """Release the pipeline, descriptor pool, descriptor sets and uniform buffers."""
        log_to_file(
            "[Pipeline::cleanupSwapChainResources] Cleaning swapchain-dependent resources..."
        )
        self.vertex_shader = None
        self.fragment_shader = None
        self.pool = None
        self.descriptor_sets = []
        log_to_file(
            f"[Descriptor::cleanupUniformBuffers] Cleaning up "
            f"{len(self.uniform_buffers)} uniform buffers."
        )
        self.uniform_buffers = []

    def descriptor_bindings(self) -> Tuple[_LayoutBinding, ...]:
        """Layout shared by every descriptor set: image sampler at 0, parameters at 1."""
        return _LAYOUT