from procflow import Token, TokenKind


def test_token() -> None:
    t = Token(kind=TokenKind.INGREDIENT, text="flour")
    assert t.kind.value == "ingredient"
    assert str(t) == "* flour"
    assert not t.is_meta


if __name__ == "__main__":
    test_token()
    print("Basic test passed!")
