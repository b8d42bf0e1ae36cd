"""Black-Scholes pricing engine and its value types."""
from .models import OptionType, OptionParameters, Greeks
from .black_scholes import BlackScholesCalculator, price, greeks

__all__ = ['OptionType', 'OptionParameters', 'Greeks',
           'BlackScholesCalculator', 'price', 'greeks']
