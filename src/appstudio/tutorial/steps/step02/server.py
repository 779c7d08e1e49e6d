def server(input, output):
    pass
