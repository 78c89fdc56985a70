"""Running RMS displacement per species over repeated Einstein passes."""

import numpy as np
import matplotlib.pyplot as plt

from supercellpy import ExpansionConfig, ExpansionContext, FractionalAtom, UnitCell, build_supercell


cell = UnitCell(
    basis=np.eye(3) * 5.64,
    atoms=(
        FractionalAtom(znum=11, position=[0.0, 0.0, 0.0], debye_waller=1.2),
        FractionalAtom(znum=17, position=[0.5, 0.5, 0.5], debye_waller=0.9),
    ),
)
context = ExpansionContext.from_config(ExpansionConfig(n_cells=(3, 3, 3), temperature=300.0, seed=1))

history = {11: [], 17: []}
for _ in range(40):
    res = build_supercell(cell, context=context)
    for znum in history:
        history[znum].append(res.rms_displacement[znum])

for znum, label in ((11, "Na"), (17, "Cl")):
    plt.plot(np.arange(1, 41), history[znum], label=label)
plt.xlabel("pass")
plt.ylabel(r"running $\sqrt{\langle u^2 \rangle}$ ($\AA$)")
plt.legend()
plt.grid(alpha=0.3)
plt.tight_layout()
plt.show()
