"""Configuration records for the tracker: features, optimiser and model settings."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class HogParameters:
    """Settings of the HOG feature extractor."""

    cell_size: int = 6
    compressed_dim: int = 10
    n_orients: int = 9
    n_dim: int = 31


@dataclass
class HogFeatures:
    """HOG feature settings together with the sample sizes they work on.

    Sizes are ``(width, height)`` pairs.
    """

    fparams: HogParameters = field(default_factory=HogParameters)
    img_input_sz: tuple[int, int] = (0, 0)
    img_sample_sz: tuple[int, int] = (0, 0)
    data_sz_block0: tuple[int, int] = (0, 0)


@dataclass
class CgOpts:
    """Options of the conjugate gradient solver."""

    debug: bool = False
    cg_use_fr: bool = False
    tol: float = 0.0
    cg_standard_alpha: bool = False
    init_forget_factor: float = 0.0
    maxit: int = 0


@dataclass
class EcoParameters:
    """All settings of the tracker."""

    # Features
    use_deep_feature: bool = False
    use_hog_feature: bool = False
    hog_features: HogFeatures = field(default_factory=HogFeatures)

    # Extra parameters
    cg_opts: CgOpts = field(default_factory=CgOpts)
    max_score_threshold: float = 0.0

    # Image sample parameters
    search_area_scale: float = 0.0
    min_image_sample_size: int = 0
    max_image_sample_size: int = 0

    # Detection parameters
    newton_iterations: int = 0

    # Learning parameters
    output_sigma_factor: float = 0.0
    learning_rate: float = 0.0
    n_samples: int = 0
    train_gap: int = 0

    # Factorized convolution parameters
    projection_reg: float = 0.0

    # Conjugate gradient parameters
    cg_iter: int = 0
    init_cg_iter: int = 0
    init_gn_iter: int = 0
    cg_use_fr: bool = False
    cg_standard_alpha: bool = False
    cg_forgetting_rate: int = 0
    precond_data_param: float = 0.0
    precond_reg_param: float = 0.0
    precond_proj_param: int = 0

    # Regularization window parameters
    use_reg_window: bool = False
    reg_window_min: float = 0.0
    reg_window_edge: float = 0.0
    reg_window_power: int = 0
    reg_sparsity_threshold: float = 0.0

    # Scale parameters
    interpolation_bicubic_a: float = 0.0
    number_of_scales: int = 0
    scale_step: float = 0.0
    min_scale_factor: float = 0.0
    max_scale_factor: float = 0.0