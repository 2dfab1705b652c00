"""Graph operators with shape inference: arithmetic, convolution, quantization, constants, KPU data movement and shape manipulation."""