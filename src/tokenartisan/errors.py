class TokenArtisanError(Exception):
    pass


class RasterError(TokenArtisanError):
    pass


class LayerError(TokenArtisanError):
    def __init__(self, message, layer_id):
        super().__init__(message)
        self.layer_id = layer_id
