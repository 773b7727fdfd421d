# ---
# jupyter:
#   jupytext:
#     cell_metadata_filter: -all
#     custom_cell_magics: kql
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#       jupytext_version: 1.11.2
#   kernelspec:
#     display_name: signalnet-py3.10
#     language: python
#     name: python3
# ---

# %%
# %load_ext autoreload
# %autoreload 2
import matplotlib.pyplot as plt
import numpy as np
from signalnet.network.network import show_network
from signalnet.network.topology import build_branching, insert_layer
from signalnet.training.error import total_squared_error
from signalnet.training.loop import train
from signalnet.type_defs import ConProperty, TrainingConfig, TuneSample

# %%
net = build_branching([4, 4, 1], branching=1, k=0.25, w=0.5, c=0.0)
show_network(net)

# %%
x = np.linspace(0, 1, 20)
samples = [TuneSample(input=[v, 1 - v, v, 1 - v], output=[0.2 + 0.6 * v]) for v in x]
total_squared_error(net, samples)

# %%
config = TrainingConfig(strategy="shallow", learn_rate=0.05, num_epochs=50, properties=[ConProperty.W, ConProperty.K])
history = train(net, samples, config)
plt.plot(history.errors)

# %%
y_hat = [net.run(s.input)[0] for s in samples]
plt.scatter(x, [s.output[0] for s in samples])
plt.plot(x, y_hat, color="red")

# %%
insert_layer(net, 1, 4)
show_network(net)
total_squared_error(net, samples)
