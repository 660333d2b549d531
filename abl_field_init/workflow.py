import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from .config import ABLConfig
from .field_init import ABLFieldInit
from .fields import ABLFields
from .geometry import Geometry
from .noise import check_seed

logger = logging.getLogger(__name__)


def _run_pass(func, tiles, max_workers: Optional[int]):
    """Apply func to every tile; returns after all tiles are done"""
    if max_workers == 1 or len(tiles) <= 1:
        return [func(tile) for tile in tiles]
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="abl-init") as executor:
        return list(executor.map(func, tiles))


def initialize_abl_fields(config: ABLConfig, geometry: Geometry, seed: int = 0,
                          max_tile=None, max_workers: Optional[int] = None,
                          fields: ABLFields = None) -> ABLFields:
    """
    One-shot initialization of all ABL fields over the domain

    Runs the mean-field pass, the temperature noise pass (when enabled) and
    the TKE pass in order. Each pass is split over tiles that are processed
    in parallel; a pass finishes on every tile before the next one starts.

    Args:
        config: ABL configuration
        geometry: Grid geometry
        seed: Run seed for the temperature noise
        max_tile: Maximum tile size per axis (default: whole domain as one tile)
        max_workers: Thread count for tile dispatch (default: executor default)
        fields: Existing fields to initialize in place (default: new zeroed fields)

    Returns:
        The initialized ABLFields
    """
    seed = check_seed(seed)
    field_init = ABLFieldInit(config)
    if fields is None:
        fields = ABLFields(geometry)

    domain = geometry.domain_box
    tiles = domain.chop(max_tile) if max_tile is not None else [domain]
    logger.info(f"Initializing {domain.num_cells} cells in {len(tiles)} tile(s)")

    def mean_fields(tile):
        field_init(tile, geometry,
                   fields.view('velocity', tile),
                   fields.view('density', tile),
                   fields.view('temperature', tile))

    def temperature_noise(tile):
        return field_init.perturb_temperature(
            tile, geometry, fields.view('temperature', tile), seed=seed)

    def tke(tile):
        field_init.init_tke(tile, fields.view('tke', tile))

    _run_pass(mean_fields, tiles, max_workers)

    if field_init.perturb_theta:
        perturbed = sum(_run_pass(temperature_noise, tiles, max_workers))
        logger.info(f"Temperature perturbed on {perturbed} cells below "
                    f"{field_init.theta_cutoff_height} m")

    _run_pass(tke, tiles, max_workers)

    logger.info(f"Initial conditions: U={field_init.mean_velocity}, rho={field_init.rho}, "
                f"tke={field_init.tke_init}")
    return fields


def plot_initial_profiles(fields: ABLFields, geometry: Geometry, save_dir: str = None):
    """
    Plot horizontally averaged initial profiles for verification

    Args:
        fields: Initialized fields
        geometry: Grid geometry
        save_dir: Directory to save plots (optional)

    Returns:
        The matplotlib figure
    """
    z_coords = geometry.cell_centers(geometry.domain_box, 2)
    u_mag = np.linalg.norm(fields.velocity, axis=-1).mean(axis=(0, 1))
    theta = fields.temperature.mean(axis=(0, 1))
    tke = fields.tke.mean(axis=(0, 1))

    fig, (ax1, ax2, ax3) = plt.subplots(1, 3, figsize=(15, 6))

    ax1.plot(u_mag, z_coords, 'b-', linewidth=2, label='Velocity magnitude')
    ax1.set_xlabel('Velocity magnitude [m/s]')
    ax1.set_ylabel('Height [m]')
    ax1.set_title('Velocity Profile')
    ax1.grid(True, alpha=0.3)
    ax1.legend()

    ax2.plot(theta, z_coords, 'r-', linewidth=2, label='Temperature')
    ax2.set_xlabel('Potential temperature [K]')
    ax2.set_ylabel('Height [m]')
    ax2.set_title('Temperature Profile')
    ax2.grid(True, alpha=0.3)
    ax2.legend()

    ax3.plot(tke, z_coords, 'g-', linewidth=2, label='TKE')
    ax3.set_xlabel('TKE [m²/s²]')
    ax3.set_ylabel('Height [m]')
    ax3.set_title('Subfilter TKE')
    ax3.grid(True, alpha=0.3)
    ax3.legend()

    plt.tight_layout()

    if save_dir:
        save_path = Path(save_dir) / 'initial_profiles.png'
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Plot saved to: {save_path}")

    return fig


# Example usage
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    config = ABLConfig.from_parameters({
        'ABL.temperature_heights': [0.0, 650.0, 750.0, 1000.0],
        'ABL.temperature_values': [300.0, 300.0, 308.0, 308.75],
        'incflo.velocity': [6.128355544951824, 5.142300877492314, 0.0],
        'incflo.density': 1.225,
        'ABL.perturb_velocity': True,
        'ABL.perturb_temperature': True,
        'ABL.cutoff_height': 50.0,
    })
    geometry = Geometry((0.0, 0.0, 0.0), (1000.0, 1000.0, 1000.0), (32, 32, 32))

    fields = initialize_abl_fields(config, geometry, seed=0, max_tile=(16, 16, 16))
    plot_initial_profiles(fields, geometry, save_dir=".")
