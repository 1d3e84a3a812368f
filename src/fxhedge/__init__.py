"""FX hedging strategy engine: option pricing, risk matrix and historical backtest."""
