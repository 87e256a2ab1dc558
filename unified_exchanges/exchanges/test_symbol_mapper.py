from unified_exchanges.exchanges.symbol_mapper import SymbolMapper


def test_safe_currency_code():
    assert SymbolMapper.safe_currency_code("btc") == "BTC"
    assert SymbolMapper.safe_currency_code("XBT") == "BTC"
    assert SymbolMapper.safe_currency_code("bcc") == "BCH"
    assert SymbolMapper.safe_currency_code(None) is None


def test_split_market_id_on_first_separator():
    assert SymbolMapper.split_market_id("btc_usdt") == ("btc", "usdt")
    assert SymbolMapper.split_market_id("a_b_c") == ("a", "b_c")
    assert SymbolMapper.split_market_id("btc") == ("btc", None)


def test_to_symbol():
    assert SymbolMapper.to_symbol("ltc", "USDT") == "LTC/USDT"


def test_reverse_market_id():
    # v2 ticker keys are quote first
    assert SymbolMapper.reverse_market_id("btc_eth") == "eth_btc"
    assert SymbolMapper.reverse_market_id("eth_btc") == "btc_eth"
    assert SymbolMapper.reverse_market_id("btc") == "btc"


def test_missing_halves_stay_unknown():
    assert SymbolMapper.split_market_id(None) == (None, None)
    assert SymbolMapper.to_symbol(None, "usdt") is None
    assert SymbolMapper.to_symbol("btceth", None) is None
