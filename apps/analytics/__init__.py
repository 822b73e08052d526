"""Analytics app package: dashboard figures for guesthouse staff."""
