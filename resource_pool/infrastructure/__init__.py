"""Infrastructure layer: storage backends and the reactor-thread bridge."""
