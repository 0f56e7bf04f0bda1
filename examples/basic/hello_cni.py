"""Parse a CNI document in 3 lines, zero config and zero deps."""

from cni_format import parse

data = parse("[greeting]\ntext = Hello\ntarget = `World`")
print(data)
