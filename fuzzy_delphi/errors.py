class FuzzyDelphiError(ValueError):
    pass


# wrong type, shape or cell values in the ratings table
class InvalidInput(FuzzyDelphiError):
    pass


class InvalidParameter(FuzzyDelphiError):
    pass


# no experts or no items
class EmptyInput(FuzzyDelphiError):
    pass
