"""Cut a tilted SrTiO3 slab into a fixed box and plot the x-y projection."""

import numpy as np
import matplotlib.pyplot as plt

from supercellpy import ExpansionConfig, FractionalAtom, UnitCell, build_supercell


basis = np.eye(3) * 3.905
cell = UnitCell(
    basis=basis,
    atoms=(
        FractionalAtom(znum=38, position=[0.0, 0.0, 0.0], debye_waller=0.62),
        FractionalAtom(znum=22, position=[0.5, 0.5, 0.5], debye_waller=0.40),
        FractionalAtom(znum=8, position=[0.5, 0.5, 0.0], debye_waller=0.73),
        FractionalAtom(znum=8, position=[0.5, 0.0, 0.5], debye_waller=0.73),
        FractionalAtom(znum=8, position=[0.0, 0.5, 0.5], debye_waller=0.73),
    ),
    title="SrTiO3",
)

config = ExpansionConfig(box=(40.0, 40.0, 20.0), tilt=(0.0, 0.0, np.deg2rad(18.4)), seed=7)
slab = build_supercell(cell, config)
pos = slab.positions()

plt.scatter(pos[:, 0], pos[:, 1], c=slab.znums(), s=4, cmap="viridis")
plt.xlim(0.0, config.box[0])
plt.ylim(0.0, config.box[1])
plt.gca().set_aspect("equal")
plt.xlabel(r"x ($\AA$)")
plt.ylabel(r"y ($\AA$)")
plt.title(f"SrTiO3 [310] slab, {slab.n_atoms} atoms")
plt.tight_layout()
plt.show()
