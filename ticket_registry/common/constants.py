# constantes con nombre de algoritmos y unidades usados en la aplicacion
ALGO_HMAC_SHA256 = "HMAC-SHA256"         # sello de integridad del estado persistido
ALGO_RSA_PSS_SHA256 = "RSA-PSS-SHA256"   # firma digital de transacciones

# unidades de valor del libro mayor
WEI_PER_ETHER = 10**18

# direcciones de cuenta: 20 bytes en hexadecimal con prefijo 0x
ADDRESS_BYTES = 20
ZERO_ADDRESS = "0x" + "00" * ADDRESS_BYTES
